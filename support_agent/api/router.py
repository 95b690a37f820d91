"""API router configuration for the support agent service."""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from support_agent.api.dependencies import get_coordinator, is_server_ready
from support_agent.api.models import HealthResponse
from support_agent.rag.coordinator import KnowledgeBaseCoordinator

from .chat import router as chat_router
from .knowledge import router as knowledge_router

# Create the main API router
api_router = APIRouter(prefix="/api")

api_router.include_router(chat_router)
api_router.include_router(knowledge_router)


@api_router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(
    server_ready: bool = Depends(is_server_ready),
    coordinator: KnowledgeBaseCoordinator = Depends(get_coordinator)
):
    """Health check endpoint."""
    return HealthResponse(
        status="ok" if server_ready else "initializing",
        timestamp=datetime.now(timezone.utc),
        knowledge_base=coordinator.status()
    )
