"""Unit tests for the similarity matcher.

Tests token normalization, Jaccard similarity and catalog matching with the
keyword boost.
"""

import pytest

from support_agent.agents.matcher import SimilarityMatcher, normalize, similarity
from support_agent.agents.models import PredefinedQA
from support_agent.data.predefined_responses import PREDEFINED_RESPONSES


@pytest.fixture
def matcher():
    """Create a matcher over the default catalog."""
    return SimilarityMatcher(match_threshold=0.3, keyword_boost=0.5)


def test_normalize():
    """Test lowercasing, punctuation removal and short token filtering."""
    assert normalize("What is EVA?") == {"what", "eva"}
    assert normalize("Thoughtful AI's agents, please!") == {"thoughtful", "ais", "agents", "please"}


def test_similarity_of_identical_text():
    """Test that a text is highly similar to itself."""
    assert similarity("Claims processing agent", "Claims processing agent") > 0.9


def test_similarity_of_disjoint_text():
    """Test that disjoint token sets have zero similarity."""
    assert similarity("apple banana cherry", "dog elephant frog") == 0


def test_similarity_with_empty_token_set():
    """Test that a text without long tokens has zero similarity."""
    assert similarity("a an of", "anything at all") == 0
    assert similarity("", "") == 0


def test_keyword_match(matcher):
    """Test that a keyword hit is boosted to the floor score."""
    match = matcher.find_best_match("What is EVA?")

    assert match is not None
    assert "eligibility" in match.answer.lower()
    assert match.confidence == pytest.approx(0.5)
    assert match.matched_question == PREDEFINED_RESPONSES[0].question


def test_matching_is_case_insensitive(matcher):
    """Test that case does not change the answer."""
    upper = matcher.find_best_match("WHAT IS EVA?")
    lower = matcher.find_best_match("what is eva?")

    assert upper is not None
    assert upper.answer == lower.answer


def test_exact_question_has_full_confidence(matcher):
    """Test that a catalog question matches itself with confidence 1."""
    question = PREDEFINED_RESPONSES[2].question

    match = matcher.find_best_match(question)

    assert match.confidence == pytest.approx(1.0)
    assert "payment" in match.answer.lower()


def test_benefits_keyword(matcher):
    """Test the benefits keyword."""
    match = matcher.find_best_match("What are the benefits?")

    assert match is not None
    assert match.matched_question == PREDEFINED_RESPONSES[4].question


@pytest.mark.parametrize("query", ["asdfghjkl qwerty", "What is the weather today?", ""])
def test_no_match(matcher, query):
    """Test queries unrelated to the catalog."""
    assert matcher.find_best_match(query) is None


def test_full_scan_overrides_keyword_match():
    """Test that a higher raw score in the full scan replaces a boosted keyword hit."""
    catalog = [
        PredefinedQA(question="alpha beta gamma delta", answer="A"),
        PredefinedQA(question="zeta theta", answer="B"),
    ]
    matcher = SimilarityMatcher(catalog=catalog, keywords={"zeta": 1}, match_threshold=0.3, keyword_boost=0.5)

    match = matcher.find_best_match("alpha beta gamma delta zeta")

    assert match.answer == "A"
    assert match.confidence == pytest.approx(0.8)


def test_keyword_boost_survives_weaker_full_scan():
    """Test that the boosted keyword score holds when the full scan finds nothing better."""
    catalog = [
        PredefinedQA(question="alpha beta gamma delta", answer="A"),
        PredefinedQA(question="zeta theta", answer="B"),
    ]
    matcher = SimilarityMatcher(catalog=catalog, keywords={"zeta": 1}, match_threshold=0.3, keyword_boost=0.5)

    match = matcher.find_best_match("alpha zeta")

    assert match.answer == "B"
    assert match.confidence == pytest.approx(0.5)


def test_below_threshold():
    """Test that weak overlaps are not returned."""
    catalog = [PredefinedQA(question="one two three four", answer="X")]
    matcher = SimilarityMatcher(catalog=catalog, keywords={}, match_threshold=0.3)

    assert matcher.find_best_match("one five six seven") is None


def test_catalog_contents():
    """Test that the catalog covers every agent."""
    questions = " ".join(qa.question.lower() for qa in PREDEFINED_RESPONSES)

    assert len(PREDEFINED_RESPONSES) >= 5
    for term in ("eva", "cam", "phil", "thoughtful ai", "benefit"):
        assert term in questions
