"""
Chat API endpoint for the support agent.
"""
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import structlog

from support_agent.agents.response_router import ResponseRouter, validate_query
from support_agent.api.dependencies import get_coordinator, get_response_router
from support_agent.api.models import ChatRequest, ChatResponse
from support_agent.core.exceptions import KnowledgeBaseNotReadyError
from support_agent.rag.coordinator import KnowledgeBaseCoordinator

logger = structlog.get_logger(__name__)
router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    coordinator: KnowledgeBaseCoordinator = Depends(get_coordinator),
    response_router: ResponseRouter = Depends(get_response_router)
):
    """Answer a support question."""
    start_time = time.time()

    if not coordinator.is_ready():
        raise KnowledgeBaseNotReadyError(details={"status": coordinator.status().model_dump(mode="json")})

    message = validate_query(request.message)

    try:
        response = await response_router.resolve(message, request.conversation_history)
    except Exception as e:
        logger.error("Error processing chat request", error=str(e))
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "Failed to process your request. Please try again.",
            }
        )

    logger.info(
        "Chat response generated",
        source=response.source.value,
        confidence=response.confidence,
        response_time=time.time() - start_time
    )

    return ChatResponse(data=response)
