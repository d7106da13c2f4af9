"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates the `notes` table.
How:   Portable column types (generic UUID, VARCHAR + CHECK for category) so
       the same migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops the table entirely (destructive — all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CATEGORIES = ("Work", "Ideas", "Shopping", "Personal")


def upgrade() -> None:
    """Create the notes table with its constraints and indexes."""
    op.create_table(
        "notes",
        sa.Column(
            "id",
            sa.Uuid(),
            nullable=False,
            comment="Unique identifier assigned on creation",
        ),
        sa.Column(
            "title",
            sa.Text(),
            nullable=False,
            server_default=sa.text("''"),
        ),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            comment="Note body; never empty",
        ),
        sa.Column(
            "category",
            sa.Enum(*CATEGORIES, name="note_category", native_enum=False, length=20),
            nullable=False,
            server_default=sa.text("'Personal'"),
        ),
        sa.Column(
            "archived",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was last modified (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("length(trim(content)) > 0", name="ck_notes_content_not_empty"),
    )

    # Both listings filter on archived and sort newest first
    op.create_index(
        "idx_notes_created_at",
        "notes",
        [sa.text("created_at DESC")],
    )
    op.create_index("idx_notes_archived", "notes", ["archived"])


def downgrade() -> None:
    """Drop the notes table entirely. All note data is lost."""
    op.drop_index("idx_notes_archived", table_name="notes")
    op.drop_index("idx_notes_created_at", table_name="notes")
    op.drop_table("notes")
