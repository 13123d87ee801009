"""AI enrichment Pydantic models."""

from __future__ import annotations

from pydantic import Field, field_validator

from .base import CamelModel


class Analysis(CamelModel):
    """Transient enrichment result for a piece of content."""

    topics: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    improvements: str = ""
    related_topics: list[str] = Field(default_factory=list)

    @field_validator("improvements", mode="before")
    @classmethod
    def join_improvement_list(cls, value):
        # Providers sometimes answer with a bullet list instead of a block
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return "\n".join(value)
        return value


class RelatedNote(CamelModel):
    """A note judged similar to some content."""

    id: str
    title: str
    similarity: float = Field(..., ge=0.0, le=1.0)


class AnalyzeRequest(CamelModel):
    """Request model for content analysis."""

    content: str | None = None
    title: str | None = None


class ContentRequest(CamelModel):
    """Request model for single-content AI operations."""

    content: str | None = None


class AnalyzeResponse(CamelModel):
    analysis: Analysis


class ImproveResponse(CamelModel):
    improved_content: str


class SuggestionsResponse(CamelModel):
    suggestions: list[str]


class RelatedNotesResponse(CamelModel):
    related_notes: list[RelatedNote]
