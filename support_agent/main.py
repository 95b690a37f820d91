"""
Main FastAPI application for the support agent service.
"""
import asyncio
import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from support_agent.agents.matcher import SimilarityMatcher
from support_agent.agents.response_router import ResponseRouter
from support_agent.api.router import api_router
from support_agent.config.settings import Settings, get_settings
from support_agent.core.exceptions import SupportAgentException, handle_exception
from support_agent.rag.coordinator import KnowledgeBaseCoordinator
from support_agent.rag.document_processor import ContentChunker
from support_agent.rag.embeddings import get_embedding_provider
from support_agent.rag.scraper import WebPageFetcher
from support_agent.rag.vector_store import VectorStore
from support_agent.services.llm_service import LLMService

logger = structlog.get_logger(__name__)
settings = get_settings()


def configure_logging(log_level: Optional[str] = None, log_format: Optional[str] = None):
    """Configure structured logging."""
    level = getattr(logging, (log_level or settings.monitoring.log_level).upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    if (log_format or settings.monitoring.log_format) == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def build_components(config: Optional[Settings] = None):
    """Wire the knowledge base, catalog matcher and completion client.

    Returns:
        Tuple of (coordinator, response_router)
    """
    config = config or settings
    chunker = ContentChunker(config.rag.chunk_size, config.rag.chunk_overlap)

    vector_store = VectorStore(
        get_embedding_provider(config.rag),
        chunker=chunker,
        embedding_delay=config.rag.embedding_delay_seconds,
        min_chunk_length=config.rag.min_chunk_length,
        relevance_threshold=config.rag.relevance_threshold
    )
    fetcher = WebPageFetcher(config.scraper, chunker=chunker)
    coordinator = KnowledgeBaseCoordinator(vector_store, fetcher)

    response_router = ResponseRouter(
        SimilarityMatcher(
            match_threshold=config.agent.match_threshold,
            keyword_boost=config.agent.keyword_boost
        ),
        coordinator,
        LLMService(config.ai),
        predefined_threshold=config.agent.predefined_confidence_threshold,
        top_k=config.rag.top_k
    )
    return coordinator, response_router


async def initialize_in_background(app: FastAPI):
    """Run the first knowledge base initialization without blocking startup."""
    try:
        result = await app.state.coordinator.initialize()
        logger.info("Knowledge base ready", message=result.message)
    except Exception as e:
        # The server keeps serving; a refresh can be requested through the API
        logger.error("Knowledge base initialization failed", error=str(e))
    finally:
        app.state.server_ready = True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info(
        "Starting support agent service",
        version=settings.service.version,
        environment=settings.service.environment
    )

    coordinator, response_router = build_components()
    app.state.coordinator = coordinator
    app.state.response_router = response_router
    app.state.server_ready = False

    init_task = asyncio.create_task(initialize_in_background(app))

    try:
        yield
    finally:
        # Shutdown
        logger.info("Shutting down support agent service")
        if not init_task.done():
            init_task.cancel()
        # The shared run is shielded from init_task, so it is stopped separately
        await coordinator.shutdown()


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title="Thoughtful AI Support Agent",
        description="Customer support agent backed by a retrieval-augmented knowledge base",
        version=settings.service.version,
        docs_url="/docs" if settings.service.debug else None,
        redoc_url="/redoc" if settings.service.debug else None,
        openapi_url="/openapi.json" if settings.service.debug else None,
        lifespan=lifespan if use_lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origin_list,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add process time header to responses."""
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        return response

    @app.exception_handler(SupportAgentException)
    async def support_agent_exception_handler(request: Request, exc: SupportAgentException):
        """Handle errors raised by the service's own components."""
        error = handle_exception(exc)
        return JSONResponse(status_code=error["status_code"], content=error)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors."""
        logger.warning("Validation error", path=request.url.path, errors=exc.errors())

        return JSONResponse(
            status_code=422,
            content={
                "error": "validation_error",
                "message": "Request validation failed",
                "details": jsonable_errors(exc),
                "timestamp": time.time(),
            }
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions, including unknown routes."""
        logger.warning("HTTP exception", path=request.url.path, status_code=exc.status_code, detail=exc.detail)

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "Not found" if exc.status_code == 404 else "http_error",
                "message": exc.detail,
                "status_code": exc.status_code,
                "timestamp": time.time(),
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", path=request.url.path, error=str(exc), exc_info=True)

        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "message": "Internal server error",
                "timestamp": time.time(),
            }
        )

    return app


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


configure_logging()
app = create_app()
