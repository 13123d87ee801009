"""Notes-related Pydantic models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import CamelModel


class Note(CamelModel):
    """A user-owned note with decoded tags and topics."""

    id: str
    user_id: str
    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    topics: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class NoteWithAnalysis(Note):
    """Note returned right after creation, carrying the ephemeral analysis fields."""

    suggestions: list[str] = Field(default_factory=list)
    improvements: str = ""
    related_topics: list[str] = Field(default_factory=list)


class NoteCreate(CamelModel):
    """Request model for creating a note.

    Fields are optional here so that missing values reach the service
    validation and produce a 400 rather than a schema error.
    """

    title: str | None = None
    content: str | None = None


class NoteUpdate(CamelModel):
    """Request model for replacing a note's title and content."""

    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None


class NoteTagsPatch(CamelModel):
    """Partial update of tags and topics.

    A field counts as present only when the client sent it with a non-null
    value. Absent fields are never written.
    """

    tags: list[str] | None = None
    topics: list[str] | None = None

    def present_fields(self) -> dict[str, list[str]]:
        """Return the fields that should be written."""
        return {
            name: getattr(self, name)
            for name in ("tags", "topics")
            if name in self.model_fields_set and getattr(self, name) is not None
        }


class NoteResponse(CamelModel):
    note: Note


class NoteCreatedResponse(CamelModel):
    note: NoteWithAnalysis


class NoteListResponse(CamelModel):
    notes: list[Note]


class DeleteResponse(CamelModel):
    ok: bool = True
