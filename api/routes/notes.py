"""Notes endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException

from ..auth import get_current_user_id
from ..dependencies import get_note_service
from ..models import (
    DeleteResponse,
    NoteCreate,
    NoteCreatedResponse,
    NoteListResponse,
    NoteResponse,
    NoteTagsPatch,
    NoteUpdate,
)
from ..observability import get_tracer
from ..services.errors import NoteNotFoundError, NoteStoreError, NoteValidationError
from ..services.note_service import NoteService

# Initialize logger
logger = structlog.get_logger(__name__)

# Get tracer
tracer = get_tracer(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("", response_model=NoteListResponse)
async def list_notes(
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """
    List all notes of the requesting user.

    Notes are sorted by last update, most recent first.
    """
    with tracer.start_as_current_span("list_notes") as span:
        span.set_attribute("user.id", user_id)

        try:
            notes = await service.list(user_id)
        except NoteStoreError as e:
            logger.error("list_notes_failed", user_id=user_id, error=str(e))
            raise HTTPException(status_code=500, detail="Failed to list notes")

        span.set_attribute("notes.count", len(notes))
        return NoteListResponse(notes=notes)


@router.post("", response_model=NoteCreatedResponse, status_code=201)
async def create_note(
    note: NoteCreate,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """
    Create a new note.

    The note is analyzed on creation: the extracted tags and topics are
    stored, and the suggestions, improvements and related topics are
    returned with the response only. Enrichment problems never block
    creation.
    """
    with tracer.start_as_current_span("create_note") as span:
        span.set_attribute("user.id", user_id)

        logger.info("note_creation_attempt", user_id=user_id, title=note.title)

        try:
            created = await service.create(note.title, note.content, user_id)
        except NoteValidationError as e:
            logger.warning("note_creation_invalid", user_id=user_id, error=str(e))
            raise HTTPException(status_code=400, detail=str(e))
        except NoteStoreError as e:
            logger.error("note_creation_failed", user_id=user_id, error=str(e))
            raise HTTPException(status_code=500, detail="Failed to create note")

        span.set_attribute("note.id", created.id)
        return NoteCreatedResponse(note=created)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """Retrieve a specific note owned by the requesting user."""
    with tracer.start_as_current_span("get_note") as span:
        span.set_attribute("user.id", user_id)
        span.set_attribute("note.id", note_id)

        try:
            note = await service.get(note_id, user_id)
        except NoteNotFoundError:
            raise HTTPException(status_code=404, detail="Note not found")
        except NoteStoreError as e:
            logger.error("get_note_failed", user_id=user_id, note_id=note_id, error=str(e))
            raise HTTPException(status_code=500, detail="Failed to load note")

        return NoteResponse(note=note)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: str,
    note_update: NoteUpdate,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """
    Replace a note's title and content.

    Tags are replaced too when supplied. The note is not re-analyzed.
    """
    with tracer.start_as_current_span("update_note") as span:
        span.set_attribute("user.id", user_id)
        span.set_attribute("note.id", note_id)

        try:
            note = await service.update(
                note_id,
                user_id,
                title=note_update.title,
                content=note_update.content,
                tags=note_update.tags,
            )
        except NoteValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except NoteNotFoundError:
            raise HTTPException(status_code=404, detail="Note not found")
        except NoteStoreError as e:
            logger.error("update_note_failed", user_id=user_id, note_id=note_id, error=str(e))
            raise HTTPException(status_code=500, detail="Failed to update note")

        return NoteResponse(note=note)


@router.patch("/{note_id}", response_model=NoteResponse)
async def patch_note_tags(
    note_id: str,
    patch: NoteTagsPatch,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """
    Update a note's tags and/or topics.

    Only the supplied fields change; omitted fields keep their stored value.
    """
    with tracer.start_as_current_span("patch_note_tags") as span:
        span.set_attribute("user.id", user_id)
        span.set_attribute("note.id", note_id)

        try:
            note = await service.patch_tags(note_id, user_id, patch)
        except NoteNotFoundError:
            raise HTTPException(status_code=404, detail="Note not found")
        except NoteStoreError as e:
            logger.error("patch_note_failed", user_id=user_id, note_id=note_id, error=str(e))
            raise HTTPException(status_code=500, detail="Failed to update tags/topics")

        return NoteResponse(note=note)


@router.delete("/{note_id}", response_model=DeleteResponse)
async def delete_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """
    Permanently delete a note.

    Only the owner can delete a note; other users get a 404.
    """
    with tracer.start_as_current_span("delete_note") as span:
        span.set_attribute("user.id", user_id)
        span.set_attribute("note.id", note_id)

        try:
            await service.delete(note_id, user_id)
        except NoteNotFoundError:
            raise HTTPException(status_code=404, detail="Note not found")
        except NoteStoreError as e:
            logger.error("delete_note_failed", user_id=user_id, note_id=note_id, error=str(e))
            raise HTTPException(status_code=500, detail="Failed to delete note")

        span.set_attribute("note.deleted", True)
        return DeleteResponse(ok=True)
