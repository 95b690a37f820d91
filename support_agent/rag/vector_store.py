"""Vector Store Implementation for the Knowledge Base

This module provides the in-memory index of embedded chunks, handling
ingestion of scraped pages and cosine similarity search.

The live index is an immutable snapshot. Ingestion builds new collections
locally and swaps the snapshot reference in one assignment, so readers never
lock and never see a partially written index.
"""

from datetime import datetime, timezone
from typing import List, Optional, Sequence
import asyncio
import time

import numpy as np
import structlog

from support_agent.config.settings import get_settings
from support_agent.core.exceptions import (
    DimensionMismatchError,
    RetrievalError,
    SupportAgentException,
)
from support_agent.rag.document_processor import ContentChunker
from support_agent.rag.embeddings import EmbeddingProvider
from support_agent.rag.models import (
    EMPTY_SNAPSHOT,
    Chunk,
    ChunkMetadata,
    IngestionResult,
    RawPage,
    SearchResult,
    VectorStoreSnapshot,
)

logger = structlog.get_logger(__name__)
settings = get_settings()


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Calculate cosine similarity between two vectors.

    Args:
        vec_a: First vector
        vec_b: Second vector

    Returns:
        Similarity in [-1, 1]; 0.0 when either vector has zero norm

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    a = np.asarray(vec_a, dtype=float)
    b = np.asarray(vec_b, dtype=float)

    if a.shape != b.shape:
        raise DimensionMismatchError(a.size, b.size)

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = np.dot(a, b) / (norm_a * norm_b)
    return float(np.clip(similarity, -1.0, 1.0))


class VectorStore:
    """In-memory vector store with linear-scan cosine search."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        chunker: Optional[ContentChunker] = None,
        embedding_delay: Optional[float] = None,
        min_chunk_length: Optional[int] = None,
        relevance_threshold: Optional[float] = None
    ):
        """Initialize the vector store.

        Args:
            embedding_provider: Provider used for chunks and queries
            chunker: Sentence-aware chunker applied to page content
            embedding_delay: Pause between embedding calls, in seconds
            min_chunk_length: Chunks shorter than this are not indexed
            relevance_threshold: Search results must score above this
        """
        self.embedding_provider = embedding_provider
        self.chunker = chunker or ContentChunker()
        self.embedding_delay = (
            settings.rag.embedding_delay_seconds if embedding_delay is None else embedding_delay
        )
        self.min_chunk_length = min_chunk_length or settings.rag.min_chunk_length
        self.relevance_threshold = (
            settings.rag.relevance_threshold if relevance_threshold is None else relevance_threshold
        )
        self._snapshot: VectorStoreSnapshot = EMPTY_SNAPSHOT

    @property
    def snapshot(self) -> VectorStoreSnapshot:
        """The currently live snapshot."""
        return self._snapshot

    @property
    def initialized(self) -> bool:
        return self._snapshot.initialized

    @property
    def document_count(self) -> int:
        return len(self._snapshot.documents)

    @property
    def last_updated(self) -> Optional[datetime]:
        return self._snapshot.last_updated

    def clear(self):
        """Drop every indexed chunk."""
        self._snapshot = EMPTY_SNAPSHOT
        logger.info("Vector store cleared")

    async def _embed(self, text: str) -> List[float]:
        return await self.embedding_provider.get_embedding(
            text[: self.embedding_provider.max_input_length]
        )

    async def ingest(self, pages: Sequence[RawPage]) -> IngestionResult:
        """Chunk, embed and index scraped pages, replacing the current index.

        Args:
            pages: Scraped pages

        Returns:
            Ingestion statistics
        """
        start_time = time.time()
        logger.info("Starting ingestion", pages=len(pages))

        documents: List[Chunk] = []
        embeddings: List[tuple] = []
        dimension = None

        for page in pages:
            page_chunks = 0
            for section in page.content:
                for text in self.chunker.chunk_text(section):
                    if len(text) < self.min_chunk_length:
                        continue

                    try:
                        vector = await self._embed(text)
                        if dimension is None:
                            dimension = len(vector)
                        elif len(vector) != dimension:
                            raise DimensionMismatchError(dimension, len(vector))

                        documents.append(Chunk(
                            id=f"{page.page_name}-{len(documents)}",
                            text=text,
                            metadata=ChunkMetadata(
                                page_name=page.page_name,
                                url=page.url,
                                scraped_at=page.scraped_at
                            )
                        ))
                        embeddings.append(tuple(float(value) for value in vector))
                        page_chunks += 1

                        if self.embedding_delay:
                            await asyncio.sleep(self.embedding_delay)

                    except Exception as e:
                        logger.error(
                            "Failed to embed chunk",
                            page=page.page_name,
                            error=str(e)
                        )

            logger.info("Page processed", page=page.page_name, chunks=page_chunks)

        self._snapshot = VectorStoreSnapshot(
            documents=tuple(documents),
            embeddings=tuple(embeddings),
            initialized=True,
            last_updated=datetime.now(timezone.utc)
        )

        logger.info(
            "Ingestion complete",
            pages=len(pages),
            chunks=len(documents),
            time_ms=round((time.time() - start_time) * 1000, 2)
        )

        return IngestionResult(
            total_pages=len(pages),
            total_chunks=len(documents),
            last_updated=self._snapshot.last_updated
        )

    async def search(self, query: str, top_k: int = 5) -> List[SearchResult]:
        """Search for chunks similar to the query.

        Args:
            query: Free-text query
            top_k: Maximum number of results before the relevance filter

        Returns:
            Results sorted by descending score, all above the relevance threshold
        """
        snapshot = self._snapshot
        if not snapshot.initialized or not snapshot.documents:
            logger.warning("Vector store not initialized or empty")
            return []

        try:
            query_vector = await self._embed(query)
        except SupportAgentException as e:
            raise RetrievalError(e.message) from e
        except Exception as e:
            raise RetrievalError(str(e)) from e

        scored = [
            (document, cosine_similarity(query_vector, embedding))
            for document, embedding in zip(snapshot.documents, snapshot.embeddings)
        ]
        scored.sort(key=lambda item: item[1], reverse=True)

        results = [
            SearchResult(
                id=document.id,
                text=document.text,
                metadata=document.metadata,
                score=score
            )
            for document, score in scored[:top_k]
            if score > self.relevance_threshold
        ]

        logger.info(
            "Vector search completed",
            results_count=len(results),
            threshold=self.relevance_threshold
        )

        return results
