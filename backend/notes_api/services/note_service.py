"""
Notes API — Note Service (Note Store Facade)
==============================================

What:  Every note operation: create, list, get, update, archive, delete.
Why:   Keeps store access and not-found/validation rules out of the routes.
How:   Each method receives the AsyncSession explicitly, performs a single
       read or write, commits its own writes and returns a NoteResponse.
Who:   Called by route handlers and by scripts/reset_db.py.

Error Handling Strategy:
    - Unknown or malformed id         → NotFoundError (404)
    - Any SQLAlchemyError             → StoreError (500), details logged only
    - Invalid input never gets here; NoteCreate / NoteUpdate reject it

Design Decision:
    NoteService is stateless: no session, engine or cache is held on the
    instance. Concurrency safety is left to the store's per-row atomicity.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, desc, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.exceptions import NotFoundError, StoreError
from notes_api.models.note import Note, NoteCategory, utcnow
from notes_api.schemas.note import NoteCreate, NoteResponse, NoteUpdate

logger = logging.getLogger(__name__)


def _label(note: Note) -> str:
    return note.title or "Untitled Note"


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - create(): insert a validated note
        - list_active() / list_archived(): filtered, newest-first listings
        - get(): single note retrieval with not-found handling
        - update(): partial update of title/content/category/archived
        - set_archived(): flip the archived flag only
        - delete(): permanent removal
        - delete_all(): wipe the table (dev startup cleanup, reset script)
    """

    # ── Create ────────────────────────────────────────────────────────────

    async def create(self, db: AsyncSession, data: NoteCreate) -> NoteResponse:
        """
        Persist a new note.

        Raises:
            StoreError: Insert failed
        """
        note = Note(
            title=data.title,
            content=data.content,
            category=data.category,
            archived=False,
        )
        try:
            db.add(note)
            await db.commit()
        except SQLAlchemyError as e:
            raise await self._store_error(db, "create note", e)

        logger.info("New note created: \"%s\" (%s)", _label(note), note.id)
        return NoteResponse.model_validate(note)

    # ── Read ──────────────────────────────────────────────────────────────

    async def list_notes(
        self,
        db: AsyncSession,
        archived: bool,
        query: Optional[str] = None,
        category: Optional[NoteCategory] = None,
    ) -> List[NoteResponse]:
        """
        List notes with the given archived flag, newest first.

        Args:
            db: Async database session
            archived: Equality filter on the archived flag
            query: Case-insensitive substring matched against title or content
            category: Equality filter on category

        Query plan (no optional filters):
            SELECT * FROM notes WHERE archived = :archived
            ORDER BY created_at DESC
        """
        stmt = select(Note).where(Note.archived == archived)

        if query and query.strip():
            # autoescape: % and _ in the query are literal characters
            needle = query.strip()
            stmt = stmt.where(or_(
                Note.title.icontains(needle, autoescape=True),
                Note.content.icontains(needle, autoescape=True),
            ))

        if category is not None:
            stmt = stmt.where(Note.category == category)

        # id as tie-breaker keeps the order stable for equal timestamps
        stmt = stmt.order_by(desc(Note.created_at), desc(Note.id))

        try:
            result = await db.execute(stmt)
            notes = list(result.scalars().all())
        except SQLAlchemyError as e:
            kind = "archived" if archived else "active"
            raise await self._store_error(db, f"list {kind} notes", e)

        logger.info("Returning %d %s notes", len(notes), "archived" if archived else "active")
        return [NoteResponse.model_validate(note) for note in notes]

    async def list_active(
        self,
        db: AsyncSession,
        query: Optional[str] = None,
        category: Optional[NoteCategory] = None,
    ) -> List[NoteResponse]:
        return await self.list_notes(db, archived=False, query=query, category=category)

    async def list_archived(
        self,
        db: AsyncSession,
        query: Optional[str] = None,
        category: Optional[NoteCategory] = None,
    ) -> List[NoteResponse]:
        return await self.list_notes(db, archived=True, query=query, category=category)

    async def get(self, db: AsyncSession, note_id: str) -> NoteResponse:
        """
        Retrieve a single note by ID.

        Raises:
            NotFoundError: Unknown or malformed id (→ 404)
            StoreError: Query execution failed (→ 500)
        """
        note = await self._load(db, note_id)
        return NoteResponse.model_validate(note)

    # ── Update ────────────────────────────────────────────────────────────

    async def update(self, db: AsyncSession, note_id: str, data: NoteUpdate) -> NoteResponse:
        """
        Apply the fields present in `data` and refresh updated_at.

        An empty body is accepted and only touches updated_at.

        Raises:
            NotFoundError: Unknown or malformed id
            StoreError: Write failed
        """
        note = await self._load(db, note_id)
        changes = data.changes()
        for field, value in changes.items():
            setattr(note, field, value)
        note.updated_at = utcnow()

        try:
            await db.commit()
        except SQLAlchemyError as e:
            raise await self._store_error(db, "update note", e, note_id=note_id)

        logger.info("Note updated: \"%s\" (fields: %s)", _label(note), ", ".join(sorted(changes)) or "none")
        return NoteResponse.model_validate(note)

    async def set_archived(self, db: AsyncSession, note_id: str, archived: bool) -> NoteResponse:
        """
        Archive or restore a note. Nothing but the flag (and updated_at) changes.

        Raises:
            NotFoundError: Unknown or malformed id
            StoreError: Write failed
        """
        note = await self._load(db, note_id)
        note.archived = archived
        note.updated_at = utcnow()

        try:
            await db.commit()
        except SQLAlchemyError as e:
            raise await self._store_error(db, "update note status", e, note_id=note_id)

        logger.info("Note %s: \"%s\"", "archived" if archived else "unarchived", _label(note))
        return NoteResponse.model_validate(note)

    # ── Delete ────────────────────────────────────────────────────────────

    async def delete(self, db: AsyncSession, note_id: str) -> None:
        """
        Permanently remove a note.

        Raises:
            NotFoundError: Unknown or malformed id (also on a second delete)
            StoreError: Write failed
        """
        note = await self._load(db, note_id)
        try:
            await db.delete(note)
            await db.commit()
        except SQLAlchemyError as e:
            raise await self._store_error(db, "delete note", e, note_id=note_id)

        logger.info("Note deleted: \"%s\"", _label(note))

    async def delete_all(self, db: AsyncSession) -> int:
        """Remove every note; returns how many were deleted."""
        try:
            result = await db.execute(delete(Note))
            await db.commit()
        except SQLAlchemyError as e:
            raise await self._store_error(db, "delete all notes", e)

        deleted = result.rowcount or 0
        logger.info("Deleted %d notes", deleted)
        return deleted

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(self, db: AsyncSession, note_id: str) -> Note:
        """Fetch the Note row or raise NotFoundError."""
        try:
            key = UUID(str(note_id))
        except ValueError:
            # Malformed ids can never match a stored note
            raise NotFoundError(resource="note", resource_id=str(note_id))

        try:
            note = await db.get(Note, key)
        except SQLAlchemyError as e:
            raise await self._store_error(db, "fetch note", e, note_id=str(note_id))

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    async def _store_error(
        self,
        db: AsyncSession,
        action: str,
        error: SQLAlchemyError,
        note_id: Optional[str] = None,
    ) -> StoreError:
        """Roll back, log the driver error, and build the StoreError to raise."""
        logger.error("Store error during %s: %s", action, str(error), exc_info=True)
        try:
            await db.rollback()
        except SQLAlchemyError:
            logger.error("Rollback after failed %s also failed", action)

        context = {"action": action, "error_type": type(error).__name__}
        if note_id:
            context["note_id"] = note_id
        return StoreError(message=f"Failed to {action}. Please try again.", context=context)


# ── Singleton Instance ────────────────────────────────────────────────────
# NoteService is stateless; one instance serves every request
note_service = NoteService()
