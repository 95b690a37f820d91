"""
Agent Data Models

Request and response models exchanged by the support agent's routing layer.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ResponseSource(str, Enum):
    """Which tier produced an answer"""
    PREDEFINED = "predefined"
    RAG = "rag"
    FALLBACK = "fallback"


class PredefinedQA(BaseModel):
    """A curated question and its canned answer"""
    question: str
    answer: str


class MatchResult(BaseModel):
    """Best catalog entry for a query"""
    answer: str
    matched_question: str
    confidence: float = Field(..., ge=0.0, le=1.0)


class ChatMessage(BaseModel):
    """One turn of conversation history"""
    role: str = Field(..., description="'user' or 'assistant'")
    content: str


class SourceReference(BaseModel):
    """Page a retrieved chunk came from"""
    page_name: str
    url: str
    relevance_score: float


class AgentResponse(BaseModel):
    """Final answer returned to the caller"""
    answer: str
    source: ResponseSource
    confidence: Optional[float] = None
    matched_question: Optional[str] = None
    sources: List[SourceReference] = Field(default_factory=list)
