"""Note orchestration: persistence plus best-effort AI enrichment."""

from __future__ import annotations

import structlog

from ..models import Analysis, Note, NoteTagsPatch, NoteWithAnalysis, RelatedNote
from ..observability import get_app_metrics, get_tracer
from .ai_gateway import AIGateway
from .errors import NoteNotFoundError, NoteValidationError
from .note_store import NoteStore

logger = structlog.get_logger(__name__)

tracer = get_tracer(__name__)


def _require(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise NoteValidationError(f"{field} is required")
    return value


class NoteService:
    """Owner-scoped note operations."""

    def __init__(self, store: NoteStore, gateway: AIGateway):
        self.store = store
        self.gateway = gateway
        self.metrics = get_app_metrics()

    async def create(
        self, title: str | None, content: str | None, user_id: str
    ) -> NoteWithAnalysis:
        """
        Create a note enriched with an AI analysis.

        The analysis tags and topics are persisted with the note; the rest of
        the analysis is returned once and not stored. If enrichment fails the
        note is created without tags or topics.
        """
        with tracer.start_as_current_span("note_service.create") as span:
            span.set_attribute("user.id", user_id)

            title = _require(title, "Title")
            content = _require(content, "Content")

            try:
                analysis = await self.gateway.analyze(content, title)
                span.set_attribute("note.enriched", True)
            except Exception as e:
                # Enrichment must never block note creation
                logger.warning("note_enrichment_failed", user_id=user_id, error=str(e))
                analysis = Analysis()
                span.set_attribute("note.enriched", False)

            note = await self.store.insert(
                user_id=user_id,
                title=title,
                content=content,
                tags=analysis.tags,
                topics=analysis.topics,
            )

            span.set_attribute("note.id", note.id)
            self.metrics.notes_created.add(1)
            logger.info("note_created", note_id=note.id, user_id=user_id, tags=len(note.tags))

            return NoteWithAnalysis(
                **note.model_dump(),
                suggestions=analysis.suggestions,
                improvements=analysis.improvements,
                related_topics=analysis.related_topics,
            )

    async def get(self, note_id: str, user_id: str) -> Note:
        note = await self.store.get(note_id, user_id)
        if note is None:
            logger.warning("note_not_found", note_id=note_id, user_id=user_id)
            raise NoteNotFoundError(note_id)
        return note

    async def list(self, user_id: str) -> list[Note]:
        """List the user's notes, most recently updated first."""
        notes = await self.store.list_for_user(user_id)
        logger.info("notes_listed", user_id=user_id, count=len(notes))
        return notes

    async def update(
        self,
        note_id: str,
        user_id: str,
        title: str | None,
        content: str | None,
        tags: list[str] | None = None,
    ) -> Note:
        """Replace title and content, and tags when given. Does not re-run enrichment."""
        fields: dict[str, object] = {
            "title": _require(title, "Title"),
            "content": _require(content, "Content"),
        }
        if tags is not None:
            fields["tags"] = tags

        note = await self.store.update(note_id, user_id, fields)
        if note is None:
            logger.warning("update_note_not_found", note_id=note_id, user_id=user_id)
            raise NoteNotFoundError(note_id)

        logger.info("note_updated", note_id=note_id, user_id=user_id)
        return note

    async def patch_tags(self, note_id: str, user_id: str, patch: NoteTagsPatch) -> Note:
        """Overwrite only the tag/topic fields present in the patch."""
        fields = patch.present_fields()
        if not fields:
            logger.info("patch_tags_no_changes", note_id=note_id, user_id=user_id)
            return await self.get(note_id, user_id)

        note = await self.store.update(note_id, user_id, fields)
        if note is None:
            logger.warning("patch_tags_note_not_found", note_id=note_id, user_id=user_id)
            raise NoteNotFoundError(note_id)

        logger.info("note_tags_patched", note_id=note_id, user_id=user_id, fields=sorted(fields))
        return note

    async def delete(self, note_id: str, user_id: str) -> None:
        """Permanently delete a note owned by the user."""
        deleted = await self.store.delete(note_id, user_id)
        if not deleted:
            logger.warning("delete_note_not_found", note_id=note_id, user_id=user_id)
            raise NoteNotFoundError(note_id)

        self.metrics.notes_deleted.add(1)
        logger.info("note_deleted", note_id=note_id, user_id=user_id)

    async def find_related(self, content: str, user_id: str) -> list[RelatedNote]:
        """Rank the user's notes by relation to the content."""
        candidates = await self.store.list_for_user(user_id)
        return await self.gateway.find_related(content, candidates)
