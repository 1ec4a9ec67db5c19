"""
hnote Backend — Note Service
=============================

What:  Note operations as the API sees them: timestamps, partial updates and
       the mapping from stored records to the wire representation.
How:   Wraps an injected NoteStore; holds no other state.
Who:   Called by the /note route handlers; calls NoteStore.

Timestamp Rules:
    create:  create_date == last_edit_time == now (UTC)
    update:  last_edit_time = max(now, previous + 1µs); create_date untouched
    Values read back without tzinfo (SQLite) are UTC by construction.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from hnote.exceptions import NotFoundError, StoreError
from hnote.models.note import Note
from hnote.schemas.note import (
    CreateNoteResponse,
    NoteCreate,
    NoteListResponse,
    NoteOut,
    NoteUpdate,
)
from hnote.store import NoteStore

logger = logging.getLogger(__name__)

_TICK = timedelta(microseconds=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive datetime; convert an aware one to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_note_out(note: Note) -> NoteOut:
    """Stored record → wire representation."""
    return NoteOut(
        id=str(note.id),
        title=note.title,
        create_date=as_utc(note.create_date),
        last_edit_time=as_utc(note.last_edit_time),
        content=note.content,
    )


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        NotFoundError and StoreError from the store propagate unchanged to the
        global handlers. Store failures are logged here with the operation and
        note id before they propagate.
    """

    def __init__(self, store: NoteStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self._clock = clock or utc_now

    async def list_notes(self) -> NoteListResponse:
        try:
            notes = await self.store.find_all()
        except StoreError as e:
            logger.error("notes getting failed: %s | Context: %s", e.message, e.context)
            raise
        return NoteListResponse(data=[to_note_out(note) for note in notes])

    async def create_note(self, payload: NoteCreate) -> CreateNoteResponse:
        """
        Insert a new note. The server sets both timestamps to the same instant.

        Raises:
            StoreError: insert failed
        """
        now = self._clock()
        note = Note(
            title=payload.title,
            content=payload.content,
            create_date=now,
            last_edit_time=now,
        )
        try:
            note = await self.store.insert(note)
        except StoreError as e:
            logger.error("note create failed: %s | Context: %s", e.message, e.context)
            raise
        logger.info("Note created: %s", note.id)
        return CreateNoteResponse(note_id=str(note.id))

    async def get_note(self, note_id: str) -> NoteOut:
        """
        Raises:
            NotFoundError: no note with this id
            StoreError: lookup failed
        """
        note = await self.store.find_by_id(note_id)
        return to_note_out(note)

    async def update_note(self, note_id: str, payload: NoteUpdate) -> NoteOut:
        """
        Apply the non-null fields of `payload` and refresh last_edit_time.

        An empty payload still refreshes last_edit_time.

        Raises:
            NotFoundError: no note with this id
            StoreError: read or write failed
        """
        current = await self.store.find_by_id(note_id)

        fields: Dict[str, Any] = payload.model_dump(exclude_none=True)
        fields["last_edit_time"] = max(
            as_utc(self._clock()),
            as_utc(current.last_edit_time) + _TICK,
        )

        try:
            note = await self.store.update_by_id(note_id, fields)
        except NotFoundError:
            # Deleted between the read and the write
            logger.info("Note %s vanished before update", note_id)
            raise
        except StoreError as e:
            logger.error("note update failed: %s | Context: %s", e.message, e.context)
            raise
        logger.info("Note updated: %s (fields=%s)", note.id, sorted(fields))
        return to_note_out(note)

    async def delete_note(self, note_id: str) -> None:
        """
        Raises:
            NotFoundError: no note with this id
            StoreError: delete failed
        """
        try:
            await self.store.delete_by_id(note_id)
        except StoreError as e:
            logger.error("note delete failed: %s | Context: %s", e.message, e.context)
            raise
        logger.info("Note deleted: %s", note_id)
