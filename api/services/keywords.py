"""Offline keyword extraction used by the demo analysis."""

# Closed list, compared against lower-cased tokens
STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to",
        "for", "of", "with", "by", "is", "are", "was", "were", "be", "been",
        "have", "has", "had", "do", "does", "did", "will", "would", "could", "should",
    }
)

MIN_KEYWORD_LENGTH = 4


def extract_keywords(text: str | None) -> list[str]:
    """Return candidate keywords in first-occurrence order.

    The text is lower-cased and split on whitespace. Tokens shorter than
    four characters and stop words are dropped. Repeated tokens are kept,
    so the result may contain duplicates.

    Args:
        text: Raw note content

    Returns:
        List of keyword tokens (empty for empty input)
    """
    if not text:
        return []

    return [
        word
        for word in text.lower().split()
        if len(word) >= MIN_KEYWORD_LENGTH and word not in STOP_WORDS
    ]
