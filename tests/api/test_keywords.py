"""Tests for keyword extraction."""

from api.services.keywords import STOP_WORDS, extract_keywords


class TestExtractKeywords:
    """Test suite for extract_keywords."""

    def test_filters_short_tokens_and_stop_words(self):
        """Tokens of three characters or less and stop words are dropped."""
        text = "The cat would have eaten the fresh salmon with great delight"

        assert extract_keywords(text) == ["eaten", "fresh", "salmon", "great", "delight"]

    def test_lowercases_and_keeps_first_occurrence_order(self):
        """Output is lower-cased and follows the source order."""
        assert extract_keywords("Python Rocks PYTHON rocks") == [
            "python",
            "rocks",
            "python",
            "rocks",
        ]

    def test_stop_words_are_case_insensitive(self):
        """Upper-case stop words are removed as well."""
        assert extract_keywords("SHOULD Could WOULD been planning") == ["planning"]

    def test_splits_on_any_whitespace(self):
        """Newlines and tabs separate tokens."""
        assert extract_keywords("first\nsecond\tthird  fourth") == [
            "first",
            "second",
            "third",
            "fourth",
        ]

    def test_punctuation_is_kept(self):
        """No tokenization beyond whitespace splitting."""
        assert extract_keywords("Hello, world!") == ["hello,", "world!"]

    def test_empty_and_none_input(self):
        """Empty input gives an empty list."""
        assert extract_keywords("") == []
        assert extract_keywords("   ") == []
        assert extract_keywords(None) == []

    def test_output_never_contains_excluded_tokens(self):
        """No stop word and no short token ever survives."""
        text = " ".join(sorted(STOP_WORDS)) + " tiny abc of meaningful words"

        keywords = extract_keywords(text)

        assert keywords == ["tiny", "meaningful", "words"]
        assert all(len(word) > 3 and word not in STOP_WORDS for word in keywords)
