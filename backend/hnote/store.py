"""
hnote Backend — Note Store
===========================

What:  CRUD over the `notes` collection: insert, find-all, find-by-id,
       update-by-id, delete-by-id.
How:   Wraps an AsyncEngine. Every operation opens its own session, so one
       NoteStore instance is shared by all concurrent requests; the engine's
       pool handles connection reuse.
Who:   Built once at startup (app lifespan or tests) and injected into the app;
       called by NoteService.

Error Translation:
    SQLAlchemy / driver errors   → StoreError (detail kept in context, logged)
    missing or malformed id      → NotFoundError
    No retries: a failed operation surfaces to the caller immediately.
"""

import logging
import uuid
from typing import Any, List, Mapping, Union

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from hnote.config import Settings
from hnote.database import Base, build_engine, build_session_factory
from hnote.exceptions import NotFoundError, StoreError
from hnote.models.note import MUTABLE_FIELDS, Note

logger = logging.getLogger(__name__)

NoteId = Union[str, uuid.UUID]

# asyncpg raises plain OSError subclasses (e.g. ConnectionRefusedError) when
# the server cannot be reached; SQLAlchemy does not wrap those.
_STORE_FAILURES = (SQLAlchemyError, OSError)


def parse_note_id(note_id: NoteId) -> uuid.UUID:
    """
    Convert a wire id into the store's native UUID.

    A string that is not a UUID cannot name any stored note, so it is
    reported as NotFoundError rather than as a client validation error.
    """
    if isinstance(note_id, uuid.UUID):
        return note_id
    try:
        return uuid.UUID(str(note_id))
    except ValueError:
        raise NotFoundError(resource="note", resource_id=str(note_id)) from None


class NoteStore:
    """
    Document-collection style access to note records.

    Responsibilities:
        - connect()/ping()/close(): connection lifecycle
        - insert(), find_all(), find_by_id(), update_by_id(), delete_by_id()
    """

    def __init__(self, engine: AsyncEngine, create_schema: bool = True):
        self._engine = engine
        self._session_factory = build_session_factory(engine)
        self._create_schema = create_schema

    @classmethod
    def from_settings(cls, settings: Settings) -> "NoteStore":
        return cls(build_engine(settings), create_schema=settings.db_create_schema)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def connect(self) -> None:
        """
        Verify the database is reachable and, if enabled, create the collection.

        Raises:
            StoreError: the database could not be reached or the table could not be created
        """
        try:
            async with self._engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if self._create_schema:
                    await conn.run_sync(Base.metadata.create_all)
        except _STORE_FAILURES as e:
            logger.error("Cannot connect to note store: %s", str(e))
            raise StoreError(
                message="note store unreachable",
                operation="connect",
                context={"error": str(e), "error_type": type(e).__name__},
            ) from e
        logger.info("Connected to note store (%s)", self._engine.url.render_as_string(hide_password=True))

    async def ping(self) -> bool:
        """Lightweight connectivity check; never raises."""
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except _STORE_FAILURES as e:
            logger.warning("Note store ping failed: %s", str(e))
            return False
        return True

    async def close(self) -> None:
        """Close every pooled connection."""
        await self._engine.dispose()

    # ── CRUD ──────────────────────────────────────────────────────────────

    async def insert(self, note: Note) -> Note:
        """
        Persist a new record, assigning a fresh id when it has none.

        Raises:
            StoreError: the write failed
        """
        if note.id is None:
            note.id = uuid.uuid4()
        try:
            async with self._session_factory() as session:
                session.add(note)
                await session.commit()
        except _STORE_FAILURES as e:
            raise self._store_error("insert", "failed to create note", e, note_id=note.id)
        return note

    async def find_all(self) -> List[Note]:
        """
        Return every record, in no particular order.

        Raises:
            StoreError: the query failed
        """
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(Note))
                return list(result.scalars().all())
        except _STORE_FAILURES as e:
            raise self._store_error("find_all", "notes fetch failed", e)

    async def find_by_id(self, note_id: NoteId) -> Note:
        """
        Raises:
            NotFoundError: no record has this id
            StoreError: the query failed
        """
        uid = parse_note_id(note_id)
        try:
            async with self._session_factory() as session:
                note = await session.get(Note, uid)
        except _STORE_FAILURES as e:
            raise self._store_error("find_by_id", "note fetch failed", e, note_id=uid)
        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    async def update_by_id(self, note_id: NoteId, fields: Mapping[str, Any]) -> Note:
        """
        Apply a partial update and return the updated record.

        Only `title`, `content` and `last_edit_time` may be changed.

        Raises:
            ValueError: `fields` names an immutable or unknown field
            NotFoundError: no record has this id
            StoreError: the read or write failed
        """
        rejected = set(fields) - MUTABLE_FIELDS
        if rejected:
            raise ValueError(f"Cannot update immutable or unknown fields: {sorted(rejected)}")

        uid = parse_note_id(note_id)
        try:
            async with self._session_factory() as session:
                note = await session.get(Note, uid)
                if note is None:
                    raise NotFoundError(resource="note", resource_id=str(note_id))
                for name, value in fields.items():
                    setattr(note, name, value)
                await session.commit()
        except _STORE_FAILURES as e:
            raise self._store_error("update_by_id", "failed to update note", e, note_id=uid)
        return note

    async def delete_by_id(self, note_id: NoteId) -> None:
        """
        Remove one record.

        Raises:
            NotFoundError: no record has this id (including one already deleted)
            StoreError: the delete failed
        """
        uid = parse_note_id(note_id)
        try:
            async with self._session_factory() as session:
                result = await session.execute(delete(Note).where(Note.id == uid))
                await session.commit()
        except _STORE_FAILURES as e:
            raise self._store_error("delete_by_id", "failed to delete note", e, note_id=uid)
        if result.rowcount == 0:
            raise NotFoundError(resource="note", resource_id=str(note_id))

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _store_error(operation: str, message: str, error: Exception, **context: Any) -> StoreError:
        ctx = {key: str(value) for key, value in context.items()}
        ctx["error"] = str(error)
        ctx["error_type"] = type(error).__name__
        logger.error("Note store %s failed: %s", operation, str(error))
        return StoreError(message=message, operation=operation, context=ctx)
