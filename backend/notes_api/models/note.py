"""
Notes API — Note SQLAlchemy Model
===================================

What:  ORM model representing the `notes` table.
Why:   Maps Python objects to rows for type-safe store operations.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - UUID primary key: assigned in Python on insert, never reassigned
    - category: stored as a short string constrained to the NoteCategory values
    - archived: indexed, since every listing filters on it
    - created_at / updated_at: UTC with timezone

    Index on created_at DESC:
        Both listings are "newest first".
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, DateTime, Enum, Index, Text, Uuid, false, text
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NoteCategory(str, enum.Enum):
    """The fixed set of tags a note can carry."""

    WORK = "Work"
    IDEAS = "Ideas"
    SHOPPING = "Shopping"
    PERSONAL = "Personal"


DEFAULT_CATEGORY = NoteCategory.PERSONAL


class Note(Base):
    """
    A short text note.

    Lifecycle:
        1. Created by NoteService.create (archived = False)
        2. Mutated in place by update / set_archived (updated_at refreshed)
        3. Removed permanently by delete; `archived` is the only soft state
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier assigned on creation",
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Note body; never empty",
    )

    # native_enum=False: stored as VARCHAR + CHECK, portable across backends.
    # values_callable: persist "Work", not the member name "WORK".
    category: Mapped[NoteCategory] = mapped_column(
        Enum(
            NoteCategory,
            name="note_category",
            native_enum=False,
            length=20,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=DEFAULT_CATEGORY,
        server_default=text("'Personal'"),
    )

    archived: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        comment="When this note was last modified (UTC)",
    )

    __table_args__ = (
        Index("idx_notes_created_at", created_at.desc()),
        Index("idx_notes_archived", "archived"),
        CheckConstraint("length(trim(content)) > 0", name="ck_notes_content_not_empty"),
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, category='{self.category}', "
            f"archived={self.archived}, created_at='{self.created_at}')>"
        )
