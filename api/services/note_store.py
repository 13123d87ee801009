"""Persistence of note records.

Tags and topics are stored as JSON text and decoded here, so callers only
ever see lists of strings.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Protocol

import structlog
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from ..models import Note
from ..observability import get_tracer
from .codec import decode_string_list, encode_string_list
from .errors import NoteStoreError

logger = structlog.get_logger(__name__)

tracer = get_tracer(__name__)

UPDATABLE_FIELDS = ("title", "content", "tags", "topics")
ENCODED_FIELDS = ("tags", "topics")


class NoteStore(Protocol):
    """Owner-scoped note persistence."""

    async def insert(
        self, user_id: str, title: str, content: str, tags: list[str], topics: list[str]
    ) -> Note: ...

    async def get(self, note_id: str, user_id: str) -> Note | None: ...

    async def list_for_user(self, user_id: str) -> list[Note]: ...

    async def update(self, note_id: str, user_id: str, fields: dict[str, Any]) -> Note | None: ...

    async def delete(self, note_id: str, user_id: str) -> bool: ...


def document_to_note(doc: dict[str, Any]) -> Note:
    """Convert a stored document into a Note, decoding tags and topics."""
    return Note(
        id=str(doc["_id"]),
        user_id=doc["user_id"],
        title=doc["title"],
        content=doc["content"],
        tags=decode_string_list(doc.get("tags")),
        topics=decode_string_list(doc.get("topics")),
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


def _encode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Keep updatable fields only and encode list-valued ones."""
    update_doc = {}
    for name in UPDATABLE_FIELDS:
        if name in fields:
            value = fields[name]
            update_doc[name] = encode_string_list(value) if name in ENCODED_FIELDS else value
    return update_doc


class MongoNoteStore:
    """Note store backed by the MongoDB ``notes`` collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.notes

    async def insert(
        self, user_id: str, title: str, content: str, tags: list[str], topics: list[str]
    ) -> Note:
        with tracer.start_as_current_span("db.notes.insert") as span:
            span.set_attribute("user.id", user_id)

            now = datetime.now(UTC)
            doc = {
                "user_id": user_id,
                "title": title,
                "content": content,
                "tags": encode_string_list(tags),
                "topics": encode_string_list(topics),
                "created_at": now,
                "updated_at": now,
            }

            try:
                result = await self.collection.insert_one(doc)
            except PyMongoError as e:
                raise NoteStoreError("Failed to insert note") from e

            doc["_id"] = result.inserted_id
            return document_to_note(doc)

    async def get(self, note_id: str, user_id: str) -> Note | None:
        if not ObjectId.is_valid(note_id):
            return None

        with tracer.start_as_current_span("db.notes.get"):
            try:
                doc = await self.collection.find_one(
                    {"_id": ObjectId(note_id), "user_id": user_id}
                )
            except PyMongoError as e:
                raise NoteStoreError("Failed to load note") from e

            return document_to_note(doc) if doc else None

    async def list_for_user(self, user_id: str) -> list[Note]:
        with tracer.start_as_current_span("db.notes.list") as span:
            try:
                cursor = self.collection.find({"user_id": user_id}).sort("updated_at", DESCENDING)
                docs = await cursor.to_list(length=None)
            except PyMongoError as e:
                raise NoteStoreError("Failed to list notes") from e

            span.set_attribute("notes.count", len(docs))
            return [document_to_note(doc) for doc in docs]

    async def update(self, note_id: str, user_id: str, fields: dict[str, Any]) -> Note | None:
        if not ObjectId.is_valid(note_id):
            return None

        with tracer.start_as_current_span("db.notes.update") as span:
            update_doc = _encode_fields(fields)
            update_doc["updated_at"] = datetime.now(UTC)
            span.set_attribute("note.fields", sorted(update_doc))

            try:
                doc = await self.collection.find_one_and_update(
                    {"_id": ObjectId(note_id), "user_id": user_id},
                    {"$set": update_doc},
                    return_document=ReturnDocument.AFTER,
                )
            except PyMongoError as e:
                raise NoteStoreError("Failed to update note") from e

            return document_to_note(doc) if doc else None

    async def delete(self, note_id: str, user_id: str) -> bool:
        if not ObjectId.is_valid(note_id):
            return False

        with tracer.start_as_current_span("db.notes.delete"):
            try:
                result = await self.collection.delete_one(
                    {"_id": ObjectId(note_id), "user_id": user_id}
                )
            except PyMongoError as e:
                raise NoteStoreError("Failed to delete note") from e

            return result.deleted_count == 1


class MemoryNoteStore:
    """In-process note store for local demo runs and tests.

    Records use the same encoded layout as the MongoDB documents.
    """

    def __init__(self):
        self.documents: dict[str, dict[str, Any]] = {}

    async def insert(
        self, user_id: str, title: str, content: str, tags: list[str], topics: list[str]
    ) -> Note:
        now = datetime.now(UTC)
        doc = {
            "_id": str(ObjectId()),
            "user_id": user_id,
            "title": title,
            "content": content,
            "tags": encode_string_list(tags),
            "topics": encode_string_list(topics),
            "created_at": now,
            "updated_at": now,
        }
        self.documents[doc["_id"]] = doc
        return document_to_note(doc)

    async def get(self, note_id: str, user_id: str) -> Note | None:
        doc = self._owned(note_id, user_id)
        return document_to_note(doc) if doc else None

    async def list_for_user(self, user_id: str) -> list[Note]:
        docs = [doc for doc in self.documents.values() if doc["user_id"] == user_id]
        docs.sort(key=lambda doc: doc["updated_at"], reverse=True)
        return [document_to_note(doc) for doc in docs]

    async def update(self, note_id: str, user_id: str, fields: dict[str, Any]) -> Note | None:
        doc = self._owned(note_id, user_id)
        if doc is None:
            return None

        doc.update(_encode_fields(fields))
        doc["updated_at"] = datetime.now(UTC)
        return document_to_note(doc)

    async def delete(self, note_id: str, user_id: str) -> bool:
        if self._owned(note_id, user_id) is None:
            return False

        del self.documents[note_id]
        return True

    def _owned(self, note_id: str, user_id: str) -> dict[str, Any] | None:
        doc = self.documents.get(note_id)
        if doc is None or doc["user_id"] != user_id:
            return None
        return doc
