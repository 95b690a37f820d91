"""
Knowledge base API endpoints.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import structlog

from support_agent.api.dependencies import get_coordinator
from support_agent.rag.coordinator import KnowledgeBaseCoordinator
from support_agent.rag.models import InitializationResult, KnowledgeBaseStatus

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/knowledge", tags=["knowledge"])


@router.get("/status", response_model=KnowledgeBaseStatus)
async def knowledge_status(coordinator: KnowledgeBaseCoordinator = Depends(get_coordinator)):
    """Current state of the knowledge base."""
    return coordinator.status()


@router.post("/refresh", response_model=InitializationResult)
async def refresh_knowledge(coordinator: KnowledgeBaseCoordinator = Depends(get_coordinator)):
    """Re-scrape every configured page and rebuild the index."""
    try:
        return await coordinator.refresh()
    except Exception as e:
        logger.error("Knowledge base refresh failed", error=str(e))
        return JSONResponse(
            status_code=500,
            content={"error": "Refresh failed", "message": str(e)}
        )
