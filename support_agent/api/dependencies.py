"""Dependency functions for the HTTP API.

Components are created once during application startup and stored on
``app.state``; these getters hand them to the endpoints.
"""

from fastapi import HTTPException, Request, status

from support_agent.agents.response_router import ResponseRouter
from support_agent.rag.coordinator import KnowledgeBaseCoordinator


def get_coordinator(request: Request) -> KnowledgeBaseCoordinator:
    """Dependency function to get the knowledge base coordinator.

    Raises:
        HTTPException: If the application has not been wired yet
    """
    coordinator = getattr(request.app.state, "coordinator", None)
    if coordinator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Knowledge base unavailable"
        )
    return coordinator


def get_response_router(request: Request) -> ResponseRouter:
    """Dependency function to get the response router."""
    response_router = getattr(request.app.state, "response_router", None)
    if response_router is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Response router unavailable"
        )
    return response_router


def is_server_ready(request: Request) -> bool:
    """Whether the first initialization attempt has finished."""
    return bool(getattr(request.app.state, "server_ready", False))
