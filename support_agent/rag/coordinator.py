"""Knowledge Base Coordinator

Owns the ingestion lifecycle of the knowledge base: fetching pages,
ingesting them into the vector store and reporting status. At most one
ingestion runs at a time; concurrent callers attach to the run in flight
and share its outcome.
"""

from typing import List, Optional
import asyncio
import time

import structlog

from support_agent.core.exceptions import IngestionAbortError
from support_agent.rag.models import (
    InitializationResult,
    KnowledgeBaseStatus,
    ScrapingSummary,
    SearchResult,
)
from support_agent.rag.scraper import WebPageFetcher
from support_agent.rag.vector_store import VectorStore

logger = structlog.get_logger(__name__)


class KnowledgeBaseCoordinator:
    """Single-flight orchestrator for knowledge base ingestion."""

    def __init__(self, vector_store: VectorStore, fetcher: WebPageFetcher):
        self.vector_store = vector_store
        self.fetcher = fetcher

        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None
        self._error: Optional[str] = None

    @property
    def is_initializing(self) -> bool:
        return self._task is not None

    @property
    def last_error(self) -> Optional[str]:
        return self._error

    def is_ready(self) -> bool:
        return self.vector_store.initialized

    def status(self) -> KnowledgeBaseStatus:
        """Current status of the knowledge base. Never mutates state."""
        snapshot = self.vector_store.snapshot
        return KnowledgeBaseStatus(
            initialized=snapshot.initialized,
            document_count=len(snapshot.documents),
            last_updated=snapshot.last_updated,
            error=self._error,
            is_initializing=self.is_initializing
        )

    async def initialize(self, force: bool = False) -> InitializationResult:
        """Initialize the knowledge base, or attach to a run already in flight.

        Args:
            force: Re-ingest even if the store is already initialized

        Returns:
            The run's result, or a no-op result carrying the current status

        Raises:
            IngestionAbortError: If no page could be fetched
        """
        if self.vector_store.initialized and not force:
            return InitializationResult(
                success=True,
                message="Knowledge base already initialized",
                status=self.status()
            )

        async with self._lock:
            task = self._task
            if task is None:
                task = asyncio.create_task(self._run(force))
                self._task = task
            else:
                logger.info("Attaching to in-flight initialization")

        # A cancelled caller must not cancel the shared run
        return await asyncio.shield(task)

    async def refresh(self) -> InitializationResult:
        """Force a full re-ingestion."""
        return await self.initialize(force=True)

    async def shutdown(self):
        """Cancel the run in flight, if any, and wait for it to unwind."""
        task = self._task
        if task is None or task.done():
            return

        logger.info("Cancelling in-flight initialization")
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def search(self, query: str, top_k: int = 5) -> List[SearchResult]:
        return await self.vector_store.search(query, top_k=top_k)

    async def _run(self, force: bool) -> InitializationResult:
        start_time = time.time()
        logger.info("Initializing knowledge base", force=force)

        try:
            # A forced run keeps serving the current snapshot until ingest swaps it
            pages = await self.fetcher.fetch_pages()
            if not pages:
                raise IngestionAbortError(
                    "No content was retrieved. Check network connectivity and the configured pages."
                )

            ingestion = await self.vector_store.ingest(pages)
            duration_ms = int((time.time() - start_time) * 1000)

            self._error = None
            logger.info(
                "Knowledge base initialized",
                duration_ms=duration_ms,
                pages=len(pages),
                chunks=ingestion.total_chunks
            )

            return InitializationResult(
                success=True,
                message="Knowledge base initialized successfully",
                duration_ms=duration_ms,
                scraping=ScrapingSummary(
                    pages_scraped=len(pages),
                    pages=[page.page_name for page in pages]
                ),
                ingestion=ingestion
            )

        except Exception as e:
            self._error = str(e)
            logger.error("Knowledge base initialization failed", error=str(e))
            raise

        finally:
            self._task = None
