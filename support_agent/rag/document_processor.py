"""Document Processor for the Knowledge Base

This module provides the chunking used by the knowledge base: a coarse
page-level split on blank lines and a sentence-aware re-chunk with word
overlap applied at ingestion time.
"""

from typing import List, Optional
import re

import structlog

from support_agent.config.settings import get_settings

logger = structlog.get_logger(__name__)
settings = get_settings()

SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
SECTION_SEPARATOR = "\n\n"
MIN_SECTION_LENGTH = 20


class ContentChunker:
    """Splits page text into bounded, sentence-respecting chunks."""

    def __init__(self, chunk_size: Optional[int] = None, chunk_overlap: Optional[int] = None):
        """Initialize the chunker.

        Args:
            chunk_size: Maximum chunk length in characters
            chunk_overlap: Overlap budget; every 10 characters carry one word
        """
        self.chunk_size = chunk_size or settings.rag.chunk_size
        self.chunk_overlap = settings.rag.chunk_overlap if chunk_overlap is None else chunk_overlap

    def split_sections(self, text: str) -> List[str]:
        """Split extracted page text on blank lines.

        Args:
            text: Full extracted text of a page

        Returns:
            Sections longer than 20 characters, trimmed
        """
        return [
            section.strip()
            for section in text.split(SECTION_SEPARATOR)
            if len(section.strip()) > MIN_SECTION_LENGTH
        ]

    def chunk_text(
        self,
        text: str,
        max_size: Optional[int] = None,
        overlap: Optional[int] = None
    ) -> List[str]:
        """Split text into chunks of whole sentences.

        Sentences are accumulated greedily. When the next sentence would push
        the buffer past ``max_size`` the buffer is emitted and the next one
        starts with the last ``overlap // 10`` words of the emitted chunk.
        A sentence longer than ``max_size`` is never cut.

        Args:
            text: Text to chunk
            max_size: Maximum chunk size (defaults to the configured size)
            overlap: Overlap budget (defaults to the configured overlap)

        Returns:
            List of chunks; empty for blank input
        """
        max_size = max_size or self.chunk_size
        overlap = self.chunk_overlap if overlap is None else overlap

        stripped = text.strip()
        if not stripped:
            return []
        if len(stripped) <= max_size:
            return [stripped]

        overlap_words = overlap // 10
        chunks = []
        current = ""

        for sentence in SENTENCE_BOUNDARY.split(stripped):
            if len(current) + len(sentence) > max_size and current:
                chunks.append(current.strip())
                tail = current.split(" ")[-overlap_words:] if overlap_words else []
                current = " ".join(tail + [sentence])
            else:
                current = f"{current} {sentence}" if current else sentence

        if current.strip():
            chunks.append(current.strip())

        return chunks
