"""Pydantic models for API requests and responses."""

from .ai import (
    AnalyzeRequest,
    AnalyzeResponse,
    Analysis,
    ContentRequest,
    ImproveResponse,
    RelatedNote,
    RelatedNotesResponse,
    SuggestionsResponse,
)
from .notes import (
    DeleteResponse,
    Note,
    NoteCreate,
    NoteCreatedResponse,
    NoteListResponse,
    NoteResponse,
    NoteTagsPatch,
    NoteUpdate,
    NoteWithAnalysis,
)

__all__ = [
    # AI models
    "Analysis",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "ContentRequest",
    # Notes models
    "DeleteResponse",
    "ImproveResponse",
    "Note",
    "NoteCreate",
    "NoteCreatedResponse",
    "NoteListResponse",
    "NoteResponse",
    "NoteTagsPatch",
    "NoteUpdate",
    "NoteWithAnalysis",
    "RelatedNote",
    "RelatedNotesResponse",
    "SuggestionsResponse",
]
