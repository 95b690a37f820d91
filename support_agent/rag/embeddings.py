"""Embedding Providers for the Knowledge Base

This module provides embedding generation for the knowledge base, converting
text into vector representations for semantic search.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import asyncio

import structlog
from openai import AsyncOpenAI

from support_agent.config.settings import RAGSettings, get_settings
from support_agent.core.exceptions import ConfigurationError, EmbeddingError

logger = structlog.get_logger(__name__)
settings = get_settings()

DEFAULT_MAX_INPUT_LENGTH = 8000


class EmbeddingProvider(ABC):
    """Abstract base class for embedding providers."""

    model_name: str = ""
    max_input_length: int = DEFAULT_MAX_INPUT_LENGTH

    @abstractmethod
    async def get_embedding(self, text: str) -> List[float]:
        """Generate an embedding for a single text."""


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Hosted embeddings through the OpenAI API."""

    def __init__(
        self,
        model_name: Optional[str] = None,
        api_key: Optional[str] = None,
        max_input_length: Optional[int] = None
    ):
        self.model_name = model_name or settings.rag.embedding_model
        self.api_key = api_key or settings.rag.openai_api_key
        self.max_input_length = max_input_length or settings.rag.embedding_max_input_length
        self.client = None
        if self.api_key:
            self.client = AsyncOpenAI(api_key=self.api_key)

    async def get_embedding(self, text: str) -> List[float]:
        """Generate an embedding for a single text.

        Args:
            text: Text to embed, already truncated by the caller

        Returns:
            Vector embedding
        """
        if not self.client:
            raise EmbeddingError("openai", "OpenAI client not initialized (missing OPENAI_API_KEY)")

        try:
            response = await self.client.embeddings.create(
                model=self.model_name,
                input=text,
                encoding_format="float"
            )
            return list(response.data[0].embedding)

        except Exception as e:
            raise EmbeddingError("openai", str(e), details={"model": self.model_name})


class SentenceTransformerEmbeddingProvider(EmbeddingProvider):
    """Local embeddings through sentence-transformers."""

    def __init__(self, model_name: Optional[str] = None, max_input_length: Optional[int] = None):
        """Initialize the embedding provider.

        Args:
            model_name: Optional model name override
            max_input_length: Optional input truncation override
        """
        self.model_name = model_name or settings.rag.local_embedding_model
        self.max_input_length = max_input_length or settings.rag.embedding_max_input_length
        self._model = None
        self._vector_size = None

        self._initialize_model()

    def _initialize_model(self):
        """Initialize the embedding model."""
        try:
            from sentence_transformers import SentenceTransformer
        except ImportError as exc:
            raise ConfigurationError(
                "embeddings",
                "sentence-transformers is required for local embeddings. "
                "Install the 'local' extra."
            ) from exc

        try:
            self._model = SentenceTransformer(self.model_name)
            self._vector_size = self._model.get_sentence_embedding_dimension()

            logger.info(
                "Embedding model initialized",
                model=self.model_name,
                vector_size=self._vector_size
            )

        except Exception as e:
            logger.error(
                "Failed to initialize embedding model",
                model=self.model_name,
                error=str(e)
            )
            raise

    @property
    def vector_size(self) -> int:
        """Get the vector size of the embedding model."""
        return self._vector_size

    async def get_embedding(self, text: str) -> List[float]:
        """Generate an embedding for a single text.

        Args:
            text: Text to embed

        Returns:
            Vector embedding
        """
        try:
            # Run in thread pool to avoid blocking
            loop = asyncio.get_running_loop()
            embedding = await loop.run_in_executor(
                None, self._generate_embedding, text
            )
            return embedding.tolist()

        except Exception as e:
            raise EmbeddingError("sentence-transformers", str(e), details={"model": self.model_name})

    def _generate_embedding(self, text: str):
        return self._model.encode(text, normalize_embeddings=True)


def get_embedding_provider(rag_settings: Optional[RAGSettings] = None) -> EmbeddingProvider:
    """Build the embedding provider selected in the settings.

    Args:
        rag_settings: Optional settings override

    Returns:
        EmbeddingProvider instance
    """
    rag_settings = rag_settings or settings.rag
    provider = rag_settings.embedding_provider.lower()

    if provider == "openai":
        return OpenAIEmbeddingProvider(
            model_name=rag_settings.embedding_model,
            api_key=rag_settings.openai_api_key,
            max_input_length=rag_settings.embedding_max_input_length
        )
    if provider == "local":
        return SentenceTransformerEmbeddingProvider(
            model_name=rag_settings.local_embedding_model,
            max_input_length=rag_settings.embedding_max_input_length
        )

    raise ConfigurationError("embeddings", f"Unknown embedding provider: {rag_settings.embedding_provider}")
