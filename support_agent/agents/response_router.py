"""
Response Router

Resolves a user question through three tiers, in order:
predefined catalog answer, knowledge-base grounded completion, plain completion.
"""

from typing import Any, List, Optional, Sequence

import structlog

from support_agent.agents.matcher import SimilarityMatcher
from support_agent.agents.models import (
    AgentResponse,
    ChatMessage,
    ResponseSource,
    SourceReference,
)
from support_agent.agents.prompts import build_system_prompt
from support_agent.config.settings import get_settings
from support_agent.core.exceptions import ValidationError
from support_agent.rag.coordinator import KnowledgeBaseCoordinator
from support_agent.rag.models import SearchResult
from support_agent.services.llm_service import LLMService

logger = structlog.get_logger(__name__)
settings = get_settings()

CONTEXT_DIVIDER = "\n\n---\n\n"


def validate_query(value: Any) -> str:
    """Return the trimmed query or raise ValidationError for non-string or blank input."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Please provide a valid message")
    return value.strip()


def build_context(results: Sequence[SearchResult]) -> str:
    """Join search results into a single source-attributed context block."""
    return CONTEXT_DIVIDER.join(
        f"[Source: {result.metadata.page_name}]\n{result.text}" for result in results
    )


class ResponseRouter:
    """Routes a question to the cheapest tier able to answer it."""

    def __init__(
        self,
        matcher: SimilarityMatcher,
        coordinator: KnowledgeBaseCoordinator,
        llm_service: LLMService,
        predefined_threshold: Optional[float] = None,
        top_k: Optional[int] = None
    ):
        self.matcher = matcher
        self.coordinator = coordinator
        self.llm_service = llm_service
        self.predefined_threshold = (
            settings.agent.predefined_confidence_threshold
            if predefined_threshold is None else predefined_threshold
        )
        self.top_k = top_k or settings.rag.top_k

    async def resolve(self, query: str, history: Optional[Sequence[ChatMessage]] = None) -> AgentResponse:
        """Answer ``query`` given the prior conversation.

        Args:
            query: User question
            history: Earlier turns, oldest first

        Returns:
            AgentResponse tagged with the tier that produced it

        Raises:
            CompletionError: If the plain completion tier fails
        """
        history = list(history or [])

        match = self.matcher.find_best_match(query)
        if match and match.confidence > self.predefined_threshold:
            logger.info("Answered from catalog", confidence=match.confidence)
            return AgentResponse(
                answer=match.answer,
                source=ResponseSource.PREDEFINED,
                confidence=match.confidence,
                matched_question=match.matched_question
            )

        if self.coordinator.is_ready():
            try:
                return await self._resolve_with_knowledge_base(query, history)
            except Exception as e:
                logger.warning("Knowledge base answer failed, falling back", error=str(e))

        answer = await self.llm_service.complete(build_system_prompt(), history, query)
        return AgentResponse(answer=answer, source=ResponseSource.FALLBACK)

    async def _resolve_with_knowledge_base(self, query: str, history: List[ChatMessage]) -> AgentResponse:
        results = await self.coordinator.search(query, top_k=self.top_k)
        context = build_context(results)

        answer = await self.llm_service.complete(build_system_prompt(context), history, query)

        if not results:
            logger.info("No relevant context found", query_length=len(query))
            return AgentResponse(answer=answer, source=ResponseSource.FALLBACK)

        logger.info("Answered from knowledge base", results=len(results))
        return AgentResponse(
            answer=answer,
            source=ResponseSource.RAG,
            confidence=max(result.score for result in results),
            sources=[
                SourceReference(
                    page_name=result.metadata.page_name,
                    url=result.metadata.url,
                    relevance_score=result.score
                )
                for result in results
            ]
        )
