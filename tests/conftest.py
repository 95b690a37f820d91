"""Test configuration for pytest.

This module sets up the Python path for tests and provides fixtures.
"""

import re
import sys
import zlib
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add the project root directory to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from support_agent.rag.embeddings import EmbeddingProvider
from support_agent.rag.models import RawPage

VECTOR_SIZE = 256
TOKEN = re.compile(r"[a-z0-9]+")


class HashingEmbeddingProvider(EmbeddingProvider):
    """Deterministic bag-of-words embeddings for tests.

    Each lowercase token is hashed into one of ``VECTOR_SIZE`` buckets, so
    texts sharing words get a positive cosine similarity.
    """

    model_name = "hashing-test"

    def __init__(self, size: int = VECTOR_SIZE):
        self.size = size
        self.calls = []

    async def get_embedding(self, text):
        self.calls.append(text)
        vector = [0.0] * self.size
        for token in TOKEN.findall(text.lower()):
            vector[zlib.crc32(token.encode("utf-8")) % self.size] += 1.0
        return vector


@pytest.fixture
def embedding_provider():
    """Deterministic embedding provider."""
    return HashingEmbeddingProvider()


def make_page(name="Home", sections=(), url=None):
    """Build a RawPage for tests."""
    return RawPage(
        page_name=name,
        url=url or f"https://example.com/{name.lower().replace(' ', '-')}",
        scraped_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        content=tuple(sections),
        full_text="\n\n".join(sections)
    )


@pytest.fixture
def page_factory():
    """Factory for RawPage instances."""
    return make_page
