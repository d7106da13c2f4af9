"""
Notes API — Note Service Unit Tests
=====================================

What:  Tests for NoteService (create, list, get, update, archive, delete).
How:   Real queries against a per-test SQLite database; a mock session
       covers the store-failure paths.

What we test:
    ✅ Defaults on create (Personal, not archived, timestamps set)
    ✅ Active / archived listings are disjoint and newest-first
    ✅ Text and category filters
    ✅ Partial update touches only the provided fields
    ✅ Archive → unarchive round trip keeps content
    ✅ Unknown, malformed and already-deleted ids raise NotFoundError
    ✅ SQLAlchemy failures become StoreError after a rollback
"""

import pytest
from unittest.mock import AsyncMock
from uuid import uuid4

from sqlalchemy.exc import OperationalError

from notes_api.exceptions import NotFoundError, StoreError
from notes_api.models.note import NoteCategory
from notes_api.schemas.note import NoteCreate, NoteUpdate
from notes_api.services.note_service import NoteService


class TestNoteServiceCreate:
    """Tests for create."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_applies_defaults(self, db_session):
        note = await self.service.create(db_session, NoteCreate(content="buy milk"))

        assert note.id is not None
        assert note.title == ""
        assert note.content == "buy milk"
        assert note.category == NoteCategory.PERSONAL
        assert note.archived is False
        assert note.created_at is not None
        assert note.updated_at is not None

    @pytest.mark.asyncio
    async def test_create_keeps_given_fields(self, db_session):
        note = await self.service.create(
            db_session,
            NoteCreate(title="Sprint", content="plan the sprint", category="Work"),
        )

        fetched = await self.service.get(db_session, str(note.id))
        assert fetched.title == "Sprint"
        assert fetched.category == NoteCategory.WORK

    @pytest.mark.asyncio
    async def test_create_assigns_unique_ids(self, db_session):
        first = await self.service.create(db_session, NoteCreate(content="one"))
        second = await self.service.create(db_session, NoteCreate(content="two"))

        assert first.id != second.id


class TestNoteServiceList:
    """Tests for list_active / list_archived."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_new_note_is_active_not_archived(self, db_session):
        note = await self.service.create(db_session, NoteCreate(content="fresh"))

        active = await self.service.list_active(db_session)
        archived = await self.service.list_archived(db_session)

        assert [n.id for n in active] == [note.id]
        assert archived == []

    @pytest.mark.asyncio
    async def test_listing_is_newest_first(self, db_session, make_note):
        db_session.add_all([
            make_note("middle", minutes=5),
            make_note("oldest", minutes=0),
            make_note("newest", minutes=10),
            make_note("archived newest", minutes=20, archived=True),
        ])
        await db_session.commit()

        active = await self.service.list_active(db_session)

        assert [n.content for n in active] == ["newest", "middle", "oldest"]

    @pytest.mark.asyncio
    async def test_archived_listing_is_newest_first(self, db_session, make_note):
        db_session.add_all([
            make_note("old archived", minutes=1, archived=True),
            make_note("new archived", minutes=2, archived=True),
            make_note("active", minutes=3),
        ])
        await db_session.commit()

        archived = await self.service.list_archived(db_session)

        assert [n.content for n in archived] == ["new archived", "old archived"]

    @pytest.mark.asyncio
    async def test_text_query_matches_title_or_content(self, db_session, make_note):
        db_session.add_all([
            make_note("eggs and MILK", minutes=1),
            make_note("call mom", title="Milkshake recipe", minutes=2),
            make_note("unrelated", minutes=3),
        ])
        await db_session.commit()

        found = await self.service.list_active(db_session, query="milk")

        assert {n.content for n in found} == {"eggs and MILK", "call mom"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["_", "%"])
    async def test_wildcard_characters_match_literally(self, db_session, make_note, query):
        db_session.add_all([
            make_note("plain text", minutes=1),
            make_note("50% off", minutes=2),
        ])
        await db_session.commit()

        found = await self.service.list_active(db_session, query=query)

        expected = ["50% off"] if query == "%" else []
        assert [n.content for n in found] == expected

    @pytest.mark.asyncio
    async def test_category_filter(self, db_session, make_note):
        db_session.add_all([
            make_note("standup", category=NoteCategory.WORK, minutes=1),
            make_note("bread", category=NoteCategory.SHOPPING, minutes=2),
        ])
        await db_session.commit()

        found = await self.service.list_active(db_session, category=NoteCategory.SHOPPING)

        assert [n.content for n in found] == ["bread"]

    @pytest.mark.asyncio
    async def test_blank_query_is_ignored(self, db_session, make_note):
        db_session.add_all([make_note("a", minutes=1), make_note("b", minutes=2)])
        await db_session.commit()

        found = await self.service.list_active(db_session, query="   ")

        assert len(found) == 2


class TestNoteServiceUpdate:
    """Tests for update and set_archived."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_update_applies_only_provided_fields(self, db_session):
        note = await self.service.create(
            db_session, NoteCreate(title="Old", content="keep me", category="Ideas")
        )

        updated = await self.service.update(db_session, str(note.id), NoteUpdate(title="New"))

        assert updated.title == "New"
        assert updated.content == "keep me"
        assert updated.category == NoteCategory.IDEAS
        assert updated.archived is False

    @pytest.mark.asyncio
    async def test_update_refreshes_updated_at(self, db_session):
        note = await self.service.create(db_session, NoteCreate(content="v1"))

        updated = await self.service.update(db_session, str(note.id), NoteUpdate(content="v2"))

        assert updated.content == "v2"
        assert updated.updated_at != note.updated_at
        assert updated.created_at == note.created_at

    @pytest.mark.asyncio
    async def test_update_unknown_id_raises(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update(db_session, str(uuid4()), NoteUpdate(title="x"))

    @pytest.mark.asyncio
    async def test_archive_then_unarchive_round_trips(self, db_session):
        note = await self.service.create(db_session, NoteCreate(content="round trip"))

        archived = await self.service.set_archived(db_session, str(note.id), True)
        assert archived.archived is True
        assert [n.id for n in await self.service.list_archived(db_session)] == [note.id]
        assert await self.service.list_active(db_session) == []

        restored = await self.service.set_archived(db_session, str(note.id), False)
        assert restored.archived is False
        assert restored.content == "round trip"
        assert restored.title == note.title
        assert restored.category == note.category

    @pytest.mark.asyncio
    async def test_set_archived_unknown_id_raises(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.set_archived(db_session, str(uuid4()), True)


class TestNoteServiceDelete:
    """Tests for get / delete / delete_all."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_delete_removes_note(self, db_session):
        note = await self.service.create(db_session, NoteCreate(content="temporary"))

        await self.service.delete(db_session, str(note.id))

        with pytest.raises(NotFoundError):
            await self.service.get(db_session, str(note.id))

    @pytest.mark.asyncio
    async def test_delete_twice_raises_second_time(self, db_session):
        note = await self.service.create(db_session, NoteCreate(content="once"))

        await self.service.delete(db_session, str(note.id))
        with pytest.raises(NotFoundError):
            await self.service.delete(db_session, str(note.id))

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, db_session):
        with pytest.raises(NotFoundError, match="not-a-uuid"):
            await self.service.get(db_session, "not-a-uuid")

    @pytest.mark.asyncio
    async def test_delete_all_returns_count(self, db_session, make_note):
        db_session.add_all([make_note("a", minutes=1), make_note("b", minutes=2, archived=True)])
        await db_session.commit()

        deleted = await self.service.delete_all(db_session)

        assert deleted == 2
        assert await self.service.list_active(db_session) == []
        assert await self.service.list_archived(db_session) == []


class TestNoteServiceStoreErrors:
    """SQLAlchemy failures must surface as StoreError, never raw driver errors."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_commit_failure(self, mock_db_session):
        mock_db_session.commit = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("database is down"))
        )

        with pytest.raises(StoreError) as exc_info:
            await self.service.create(mock_db_session, NoteCreate(content="lost"))

        assert exc_info.value.context["action"] == "create note"
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_query_failure(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection reset"))
        )

        with pytest.raises(StoreError):
            await self.service.list_active(mock_db_session)

    @pytest.mark.asyncio
    async def test_lookup_failure(self, mock_db_session):
        mock_db_session.get = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("timeout"))
        )

        with pytest.raises(StoreError) as exc_info:
            await self.service.delete(mock_db_session, str(uuid4()))

        assert "note_id" in exc_info.value.context
