"""
Request and response models for the HTTP API.
"""
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from support_agent.agents.models import AgentResponse, ChatMessage
from support_agent.rag.models import KnowledgeBaseStatus


class ChatRequest(BaseModel):
    """Chat request body.

    ``message`` is left untyped so malformed input reaches the handler and is
    rejected with a 400 rather than a schema error.
    """
    message: Optional[Any] = None
    conversation_history: List[ChatMessage] = Field(default_factory=list)


class ChatResponse(BaseModel):
    """Successful chat response"""
    success: bool = True
    data: AgentResponse


class HealthResponse(BaseModel):
    """Service health"""
    status: str = Field(..., description="'ok' once the first initialization attempt has finished")
    timestamp: datetime
    knowledge_base: KnowledgeBaseStatus
