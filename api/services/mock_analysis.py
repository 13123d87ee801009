"""Deterministic analysis used when the AI provider is not available."""

from __future__ import annotations

from ..models import Analysis
from .keywords import extract_keywords

DEFAULT_SUGGESTIONS = (
    "Consider adding more specific examples",
    "You might want to expand on this point",
    "Add a conclusion or next steps",
)

DEFAULT_IMPROVEMENTS = (
    "The content looks good! Consider varying sentence length for better flow."
)

TOPIC_COUNT = 3
TAG_COUNT = 5
RELATED_TOPIC_COUNT = 3


def generate_mock_analysis(
    content: str | None, title: str | None = None  # noqa: ARG001
) -> Analysis:
    """Build an analysis from keyword heuristics alone.

    Never raises. ``title`` is accepted for signature parity with the
    provider-backed analysis and is not used.
    """
    keywords = extract_keywords(content)

    return Analysis(
        topics=keywords[:TOPIC_COUNT],
        tags=keywords[:TAG_COUNT],
        suggestions=list(DEFAULT_SUGGESTIONS),
        improvements=DEFAULT_IMPROVEMENTS,
        related_topics=keywords[:RELATED_TOPIC_COUNT],
    )
