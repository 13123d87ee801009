"""Tests for the note service orchestration."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from api.models import NoteTagsPatch
from api.services.ai_gateway import AIGateway
from api.services.errors import NoteNotFoundError, NoteValidationError
from api.services.keywords import extract_keywords
from api.services.note_service import NoteService

CONTENT = "Planning the quarterly roadmap with design and engineering teams tomorrow"


@pytest.fixture
def service(note_store, demo_settings):
    return NoteService(note_store, AIGateway(demo_settings))


@pytest.mark.asyncio
class TestCreate:
    """Test suite for NoteService.create."""

    async def test_create_persists_tags_and_topics(self, service, note_store):
        """Analysis tags and topics are stored with the note."""
        note = await service.create("Kickoff", CONTENT, "user-1")

        keywords = extract_keywords(CONTENT)
        assert note.tags == keywords[:5]
        assert note.topics == keywords[:3]
        assert len(note.suggestions) == 3
        assert note.related_topics == keywords[:3]

        stored = await note_store.get(note.id, "user-1")
        assert stored.tags == keywords[:5]
        assert stored.topics == keywords[:3]

    @pytest.mark.parametrize(
        "title,content", [(None, CONTENT), ("", CONTENT), ("T", None), ("T", "  ")]
    )
    async def test_create_requires_title_and_content(self, service, note_store, title, content):
        with pytest.raises(NoteValidationError):
            await service.create(title, content, "user-1")

        assert note_store.documents == {}

    async def test_enrichment_failure_does_not_block_creation(self, note_store):
        """A gateway that raises still lets the note be created."""
        gateway = AsyncMock(spec=AIGateway)
        gateway.analyze.side_effect = RuntimeError("provider exploded")
        service = NoteService(note_store, gateway)

        note = await service.create("Kickoff", CONTENT, "user-1")

        assert note.tags == []
        assert note.topics == []
        assert note.suggestions == []
        assert await note_store.get(note.id, "user-1") is not None


@pytest.mark.asyncio
class TestUpdates:
    """Test suite for update, patch_tags and delete."""

    async def test_update_replaces_title_and_content(self, service):
        note = await service.create("Kickoff", CONTENT, "user-1")

        updated = await service.update(note.id, "user-1", "New title", "New content body")

        assert updated.title == "New title"
        assert updated.content == "New content body"
        # No re-enrichment: tags stay as created
        assert updated.tags == note.tags
        assert updated.updated_at >= note.updated_at

    async def test_update_replaces_tags_when_given(self, service):
        note = await service.create("Kickoff", CONTENT, "user-1")

        updated = await service.update(note.id, "user-1", "T", "C", tags=["manual"])

        assert updated.tags == ["manual"]
        assert updated.topics == note.topics

    async def test_update_requires_fields(self, service):
        note = await service.create("Kickoff", CONTENT, "user-1")

        with pytest.raises(NoteValidationError):
            await service.update(note.id, "user-1", "T", "")

    async def test_update_other_users_note(self, service):
        note = await service.create("Kickoff", CONTENT, "user-1")

        with pytest.raises(NoteNotFoundError):
            await service.update(note.id, "user-2", "T", "C")

    async def test_patch_tags_leaves_topics_untouched(self, service):
        note = await service.create("Kickoff", CONTENT, "user-1")

        patched = await service.patch_tags(note.id, "user-1", NoteTagsPatch(tags=["x"]))

        assert patched.tags == ["x"]
        assert patched.topics == note.topics

    async def test_patch_topics_only(self, service):
        note = await service.create("Kickoff", CONTENT, "user-1")

        patched = await service.patch_tags(note.id, "user-1", NoteTagsPatch(topics=[]))

        assert patched.topics == []
        assert patched.tags == note.tags

    async def test_patch_null_field_is_absent(self, service):
        note = await service.create("Kickoff", CONTENT, "user-1")

        patched = await service.patch_tags(
            note.id, "user-1", NoteTagsPatch.model_validate({"tags": None, "topics": ["t"]})
        )

        assert patched.tags == note.tags
        assert patched.topics == ["t"]

    async def test_empty_patch_returns_note_unchanged(self, service):
        note = await service.create("Kickoff", CONTENT, "user-1")

        patched = await service.patch_tags(note.id, "user-1", NoteTagsPatch())

        assert patched.updated_at == note.updated_at

    async def test_delete_checks_ownership(self, service, note_store):
        """Another user cannot delete the note."""
        note = await service.create("Kickoff", CONTENT, "user-1")

        with pytest.raises(NoteNotFoundError):
            await service.delete(note.id, "user-2")
        assert await note_store.get(note.id, "user-1") is not None

        await service.delete(note.id, "user-1")
        assert await note_store.get(note.id, "user-1") is None


@pytest.mark.asyncio
class TestQueries:
    """Test suite for list, get and find_related."""

    async def test_list_orders_by_updated_at_desc(self, service):
        first = await service.create("First", CONTENT, "user-1")
        await asyncio.sleep(0.001)
        second = await service.create("Second", CONTENT, "user-1")
        await asyncio.sleep(0.001)
        await service.patch_tags(first.id, "user-1", NoteTagsPatch(tags=["bump"]))

        notes = await service.list("user-1")

        assert [note.id for note in notes] == [first.id, second.id]
        assert all(a.updated_at >= b.updated_at for a, b in zip(notes, notes[1:]))

    async def test_list_is_scoped_to_user(self, service):
        await service.create("Mine", CONTENT, "user-1")
        await service.create("Theirs", CONTENT, "user-2")

        assert [note.title for note in await service.list("user-1")] == ["Mine"]

    async def test_get_missing(self, service):
        with pytest.raises(NoteNotFoundError):
            await service.get("does-not-exist", "user-1")

    async def test_find_related_uses_users_notes(self, service):
        for i in range(4):
            await service.create(f"Note {i}", CONTENT, "user-1")
        await service.create("Foreign", CONTENT, "user-2")

        related = await service.find_related("roadmap", "user-1")

        assert len(related) == 3
        assert all(item.title.startswith("Note") for item in related)
        assert all(0.0 <= item.similarity <= 1.0 for item in related)
