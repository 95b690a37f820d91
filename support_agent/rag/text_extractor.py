"""Text Extractor for the Knowledge Base

Converts raw page markup into a clean, deduplicated sequence of text
fragments separated by blank lines.
"""

from typing import List, Tuple

import structlog
from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

logger = structlog.get_logger(__name__)

NOISE_TAGS = frozenset({"script", "style", "nav", "footer", "header", "noscript"})
HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4"})
CONTENT_TAGS = HEADING_TAGS | frozenset({"p", "li", "a", "span", "div"})

MIN_HEADING_LENGTH = 3
MIN_CONTENT_LENGTH = 10


class TextExtractor:
    """Extracts readable text fragments from HTML."""

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser

    def extract_fragments(self, markup: str) -> List[str]:
        """Return the unique content fragments of a document in reading order."""
        if not markup or not markup.strip():
            return []

        soup = BeautifulSoup(markup, self.parser)
        fragments: List[str] = []

        # (node, inside_noise); children are pushed reversed to keep document order
        stack: List[Tuple[Tag, bool]] = [(soup, False)]
        while stack:
            node, inside_noise = stack.pop()
            name = (node.name or "").lower()
            inside_noise = inside_noise or name in NOISE_TAGS

            if not inside_noise and name in CONTENT_TAGS:
                text = self._own_text(node)
                min_length = MIN_HEADING_LENGTH if name in HEADING_TAGS else MIN_CONTENT_LENGTH
                if len(text) >= min_length:
                    fragments.append(text)

            children = [child for child in node.children if isinstance(child, Tag)]
            stack.extend((child, inside_noise) for child in reversed(children))

        return list(dict.fromkeys(fragments))

    def extract_text(self, markup: str) -> str:
        """Return the unique content fragments joined with blank lines."""
        return "\n\n".join(self.extract_fragments(markup))

    @staticmethod
    def _own_text(node: Tag) -> str:
        """Text nodes directly inside ``node``, trimmed and space joined."""
        parts = []
        for child in node.children:
            if isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
                stripped = child.strip()
                if stripped:
                    parts.append(stripped)
        return " ".join(parts)


def extract_text_from_html(markup: str) -> str:
    """Convenience wrapper around :class:`TextExtractor`."""
    return TextExtractor().extract_text(markup)
