"""
Similarity Matcher

Matches free-text questions against the predefined Q&A catalog using word
overlap (Jaccard) similarity with a keyword boost.
"""

import re
from typing import Dict, Optional, Sequence, Set

import structlog

from support_agent.agents.models import MatchResult, PredefinedQA
from support_agent.config.settings import get_settings
from support_agent.data.predefined_responses import PREDEFINED_RESPONSES

logger = structlog.get_logger(__name__)
settings = get_settings()

NON_WORD = re.compile(r"[^\w\s]")
MIN_TOKEN_LENGTH = 3

# Keyword -> index into the default catalog. Order matters: pass one walks it top to bottom.
KEYWORD_INDEX: Dict[str, int] = {
    "eva": 0,
    "eligibility": 0,
    "verification": 0,
    "cam": 1,
    "claims": 1,
    "processing": 1,
    "phil": 2,
    "payment": 2,
    "posting": 2,
    "agents": 3,
    "thoughtful": 3,
    "benefits": 4,
    "advantages": 4,
}


def normalize(text: str) -> Set[str]:
    """Lowercase, drop punctuation and return the set of tokens longer than two characters."""
    cleaned = NON_WORD.sub("", text.lower())
    return {word for word in cleaned.split() if len(word) >= MIN_TOKEN_LENGTH}


def similarity(text_a: str, text_b: str) -> float:
    """Jaccard index of the normalized token sets; 0 when either set is empty."""
    words_a = normalize(text_a)
    words_b = normalize(text_b)

    if not words_a or not words_b:
        return 0.0

    intersection = len(words_a & words_b)
    union = len(words_a) + len(words_b) - intersection
    return intersection / union


class SimilarityMatcher:
    """Finds the closest predefined answer for a query."""

    def __init__(
        self,
        catalog: Optional[Sequence[PredefinedQA]] = None,
        keywords: Optional[Dict[str, int]] = None,
        match_threshold: Optional[float] = None,
        keyword_boost: Optional[float] = None
    ):
        self.catalog = list(PREDEFINED_RESPONSES if catalog is None else catalog)
        self.keywords = KEYWORD_INDEX if keywords is None else keywords
        self.match_threshold = (
            settings.agent.match_threshold if match_threshold is None else match_threshold
        )
        self.keyword_boost = settings.agent.keyword_boost if keyword_boost is None else keyword_boost

    def find_best_match(self, query: str) -> Optional[MatchResult]:
        """Return the best catalog match for ``query`` or None.

        Keyword hits are scored first and floored at the keyword boost. The
        full catalog scan that follows replaces the running best whenever it
        finds a strictly higher raw score.
        """
        best: Optional[PredefinedQA] = None
        best_score = 0.0

        lowered = query.lower()
        for keyword, index in self.keywords.items():
            if keyword not in lowered or index >= len(self.catalog):
                continue
            entry = self.catalog[index]
            score = similarity(query, entry.question)
            if score > best_score:
                best_score = max(score, self.keyword_boost)
                best = entry

        for entry in self.catalog:
            score = similarity(query, entry.question)
            if score > best_score:
                best_score = score
                best = entry

        if best is None or best_score < self.match_threshold:
            logger.debug("No predefined match", confidence=best_score)
            return None

        logger.debug("Predefined match found", question=best.question, confidence=best_score)
        return MatchResult(
            answer=best.answer,
            matched_question=best.question,
            confidence=best_score
        )
