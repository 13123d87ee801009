"""Tests for the offline analysis generator."""

from api.services.mock_analysis import (
    DEFAULT_IMPROVEMENTS,
    DEFAULT_SUGGESTIONS,
    generate_mock_analysis,
)


class TestGenerateMockAnalysis:
    """Test suite for generate_mock_analysis."""

    def test_fields_come_from_keywords(self):
        """Topics, tags and related topics are prefixes of the keyword list."""
        content = "alpha bravo charlie delta echo foxtrot golf"

        analysis = generate_mock_analysis(content, "Title")

        assert analysis.topics == ["alpha", "bravo", "charlie"]
        assert analysis.tags == ["alpha", "bravo", "charlie", "delta", "echo"]
        assert analysis.related_topics == ["alpha", "bravo", "charlie"]

    def test_fixed_suggestions_and_improvements(self):
        """Suggestions and improvements are constants."""
        analysis = generate_mock_analysis("anything goes here", "")

        assert analysis.suggestions == list(DEFAULT_SUGGESTIONS)
        assert len(analysis.suggestions) == 3
        assert analysis.improvements == DEFAULT_IMPROVEMENTS

    def test_deterministic(self):
        """Same input, same output."""
        content = "Meeting notes about budget planning and hiring"

        assert generate_mock_analysis(content, "a") == generate_mock_analysis(content, "a")

    def test_title_is_ignored(self):
        """The title does not influence the result."""
        content = "Meeting notes about budget planning"

        assert generate_mock_analysis(content, "One") == generate_mock_analysis(content, "Two")

    def test_empty_content(self):
        """Empty or missing content still yields a complete analysis."""
        for content in ("", None, "a an the"):
            analysis = generate_mock_analysis(content, None)

            assert analysis.topics == []
            assert analysis.tags == []
            assert analysis.related_topics == []
            assert len(analysis.suggestions) == 3

    def test_serializes_with_camel_case(self):
        """relatedTopics is exposed under its camelCase name."""
        dumped = generate_mock_analysis("planning roadmap", "").model_dump(by_alias=True)

        assert set(dumped) == {"topics", "tags", "suggestions", "improvements", "relatedTopics"}
