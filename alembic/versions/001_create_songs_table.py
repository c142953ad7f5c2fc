"""Create songs table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `songs` table read and written by SqlSongStore.
How:   PostgreSQL TEXT[] columns for voices and instruments, UUID primary
       key generated by the application.

Rollback: downgrade() drops the table (all songs are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "songs",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            nullable=False,
            comment="Song identifier, generated by the application (UUID4)",
        ),
        sa.Column("author", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column(
            "voices",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            comment="Subset of: lucio, cristiano",
        ),
        sa.Column(
            "instruments",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            comment="Always contains chitarra; duplicates allowed",
        ),
        sa.Column(
            "key_offset",
            sa.Float(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Transposition in semitones",
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("songs")
