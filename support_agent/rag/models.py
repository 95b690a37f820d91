"""Knowledge Base Data Models

This module defines the data models used by the knowledge base for page
scraping, chunking, embedding, retrieval and lifecycle reporting.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class PageSource(BaseModel):
    """A page to be scraped into the knowledge base."""
    url: str
    name: str


class RawPage(BaseModel):
    """Cleaned content of one scraped page."""
    model_config = ConfigDict(frozen=True)

    page_name: str
    url: str
    scraped_at: datetime
    content: Tuple[str, ...] = ()
    full_text: str = ""


class ChunkMetadata(BaseModel):
    """Provenance of a chunk."""
    model_config = ConfigDict(frozen=True)

    page_name: str
    url: str
    scraped_at: Optional[datetime] = None


class Chunk(BaseModel):
    """Embedded unit of text held by the vector store."""
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    metadata: ChunkMetadata


class SearchResult(BaseModel):
    """A chunk ranked against a query."""
    id: str
    text: str
    metadata: ChunkMetadata
    score: float


class IngestionResult(BaseModel):
    """Outcome of a vector store ingestion."""
    total_pages: int
    total_chunks: int
    last_updated: Optional[datetime] = None


class ScrapingSummary(BaseModel):
    """Pages retrieved during an initialization run."""
    pages_scraped: int
    pages: List[str] = Field(default_factory=list)


class KnowledgeBaseStatus(BaseModel):
    """Externally visible state of the knowledge base."""
    initialized: bool
    document_count: int
    last_updated: Optional[datetime] = None
    error: Optional[str] = None
    is_initializing: bool = False


class InitializationResult(BaseModel):
    """Outcome of an initialize or refresh call."""
    success: bool = True
    message: str
    duration_ms: Optional[int] = None
    scraping: Optional[ScrapingSummary] = None
    ingestion: Optional[IngestionResult] = None
    status: Optional[KnowledgeBaseStatus] = None


@dataclass(frozen=True)
class VectorStoreSnapshot:
    """Immutable view of the index, swapped as a whole on ingestion."""
    documents: Tuple[Chunk, ...] = ()
    embeddings: Tuple[Tuple[float, ...], ...] = ()
    initialized: bool = False
    last_updated: Optional[datetime] = None


EMPTY_SNAPSHOT = VectorStoreSnapshot()
