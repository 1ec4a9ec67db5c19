"""
hnote Backend — Note Store Tests
=================================

What:  CRUD behaviour of NoteStore against a real SQLite database.
How:   Each test gets a fresh database file under tmp_path (see conftest.py).

What we test:
    ✅ insert assigns an id when the record has none, keeps one it has
    ✅ find_all on an empty collection returns []
    ✅ find_by_id / update_by_id / delete_by_id raise NotFoundError for
       unknown, malformed and deleted ids
    ✅ update_by_id rejects immutable fields
    ✅ an unreachable database surfaces as StoreError on every operation
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from hnote.config import Settings
from hnote.exceptions import NotFoundError, StoreError
from hnote.models.note import Note
from hnote.store import NoteStore, parse_note_id


def make_note(title="T", content="C", when=None, **kwargs):
    when = when or datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    return Note(title=title, content=content, create_date=when, last_edit_time=when, **kwargs)


class TestParseNoteId:

    def test_accepts_uuid_and_string(self):
        uid = uuid.uuid4()
        assert parse_note_id(uid) is uid
        assert parse_note_id(str(uid)) == uid

    def test_malformed_id_is_not_found(self):
        with pytest.raises(NotFoundError):
            parse_note_id("not-a-note-id")


class TestNoteStoreInsertAndFind:

    @pytest.mark.asyncio
    async def test_find_all_empty(self, store):
        assert await store.find_all() == []

    @pytest.mark.asyncio
    async def test_insert_assigns_id(self, store):
        note = await store.insert(make_note())

        assert isinstance(note.id, uuid.UUID)
        found = await store.find_by_id(str(note.id))
        assert found.title == "T"
        assert found.content == "C"

    @pytest.mark.asyncio
    async def test_insert_keeps_given_id(self, store):
        uid = uuid.uuid4()
        note = await store.insert(make_note(id=uid))

        assert note.id == uid
        assert (await store.find_by_id(uid)).id == uid

    @pytest.mark.asyncio
    async def test_insert_duplicate_id_is_store_error(self, store):
        uid = uuid.uuid4()
        await store.insert(make_note(id=uid))

        with pytest.raises(StoreError) as exc_info:
            await store.insert(make_note(id=uid))
        assert exc_info.value.operation == "insert"
        assert exc_info.value.message == "failed to create note"

    @pytest.mark.asyncio
    async def test_find_all_returns_every_record(self, store):
        ids = set()
        for i in range(3):
            ids.add((await store.insert(make_note(title=f"note {i}"))).id)

        notes = await store.find_all()

        assert {note.id for note in notes} == ids

    @pytest.mark.asyncio
    async def test_find_by_id_unknown(self, store):
        with pytest.raises(NotFoundError):
            await store.find_by_id(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_empty_strings_round_trip(self, store):
        note = await store.insert(make_note(title="", content=""))

        found = await store.find_by_id(note.id)
        assert found.title == ""
        assert found.content == ""


class TestNoteStoreUpdate:

    @pytest.mark.asyncio
    async def test_update_changes_only_given_fields(self, store):
        note = await store.insert(make_note())
        later = note.last_edit_time + timedelta(minutes=5)

        updated = await store.update_by_id(note.id, {"content": "C2", "last_edit_time": later})

        assert updated.id == note.id
        assert updated.title == "T"
        assert updated.content == "C2"
        found = await store.find_by_id(note.id)
        assert found.content == "C2"
        assert found.title == "T"

    @pytest.mark.asyncio
    async def test_update_rejects_immutable_fields(self, store):
        note = await store.insert(make_note())

        with pytest.raises(ValueError):
            await store.update_by_id(note.id, {"create_date": datetime.now(timezone.utc)})
        with pytest.raises(ValueError):
            await store.update_by_id(note.id, {"id": uuid.uuid4()})

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, store):
        with pytest.raises(NotFoundError):
            await store.update_by_id(uuid.uuid4(), {"title": "x"})


class TestNoteStoreDelete:

    @pytest.mark.asyncio
    async def test_delete_then_everything_is_not_found(self, store):
        note = await store.insert(make_note())

        await store.delete_by_id(str(note.id))

        with pytest.raises(NotFoundError):
            await store.find_by_id(note.id)
        with pytest.raises(NotFoundError):
            await store.update_by_id(note.id, {"title": "x"})
        with pytest.raises(NotFoundError):
            await store.delete_by_id(note.id)
        assert await store.find_all() == []

    @pytest.mark.asyncio
    async def test_delete_malformed_id(self, store):
        with pytest.raises(NotFoundError):
            await store.delete_by_id("12345")


class TestNoteStoreConnectivity:

    @pytest.mark.asyncio
    async def test_ping_connected(self, store):
        assert await store.ping() is True

    @pytest.mark.asyncio
    async def test_unreachable_database(self, tmp_path):
        missing_dir = tmp_path / "does" / "not" / "exist"
        broken = NoteStore.from_settings(
            Settings(database_url=f"sqlite+aiosqlite:///{missing_dir / 'hnote.db'}")
        )
        try:
            with pytest.raises(StoreError) as exc_info:
                await broken.connect()
            assert exc_info.value.operation == "connect"

            with pytest.raises(StoreError) as exc_info:
                await broken.find_all()
            assert exc_info.value.message == "notes fetch failed"

            assert await broken.ping() is False
        finally:
            await broken.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation, args, message",
        [
            ("find_by_id", (), "note fetch failed"),
            ("update_by_id", ({"title": "x"},), "failed to update note"),
            ("delete_by_id", (), "failed to delete note"),
        ],
    )
    async def test_unreachable_database_per_record(self, tmp_path, operation, args, message):
        missing_dir = tmp_path / "does" / "not" / "exist"
        broken = NoteStore.from_settings(
            Settings(database_url=f"sqlite+aiosqlite:///{missing_dir / 'hnote.db'}")
        )
        try:
            with pytest.raises(StoreError) as exc_info:
                await getattr(broken, operation)(uuid.uuid4(), *args)
            assert exc_info.value.operation == operation
            assert exc_info.value.message == message
        finally:
            await broken.close()
