"""Exceptions raised by the note services and translated by the routes."""


class NoteServiceError(Exception):
    """Base class for note service errors."""


class NoteValidationError(NoteServiceError):
    """A required field is missing or blank."""


class NoteNotFoundError(NoteServiceError):
    """The note does not exist or belongs to another user."""

    def __init__(self, note_id: str):
        super().__init__(f"Note {note_id} not found")
        self.note_id = note_id


class NoteStoreError(NoteServiceError):
    """The persistence layer failed."""
