"""initial catalog schema

Revision ID: 3f9c2a7e1b04
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f9c2a7e1b04"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LIVE_ROWS = sa.text("deleted_at IS NULL")


def _bookkeeping_columns():
    return [
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_by", sa.String(), nullable=True),
        sa.Column("deletion_reason", sa.Text(), nullable=True),
    ]


def _live_name_index(table: str) -> None:
    op.create_index(
        f"uq_{table}_live_name",
        table,
        ["name"],
        unique=True,
        sqlite_where=LIVE_ROWS,
        postgresql_where=LIVE_ROWS,
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "keywords",
        sa.Column("name", sa.String(length=255), nullable=False),
        *_bookkeeping_columns(),
        sa.CheckConstraint("name != ''", name="ck_keyword_non_empty_name"),
        sa.PrimaryKeyConstraint("id"),
    )
    _live_name_index("keywords")

    op.create_table(
        "tags",
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("keywords", sa.JSON(), nullable=False),
        *_bookkeeping_columns(),
        sa.CheckConstraint("name != ''", name="ck_tag_non_empty_name"),
        sa.PrimaryKeyConstraint("id"),
    )
    _live_name_index("tags")

    op.create_table(
        "plans",
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        *_bookkeeping_columns(),
        sa.CheckConstraint("name != ''", name="ck_plan_non_empty_name"),
        sa.PrimaryKeyConstraint("id"),
    )
    _live_name_index("plans")

    op.create_table(
        "spots",
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("contact_info", sa.JSON(), nullable=False),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("pictures", sa.JSON(), nullable=False),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("categories", sa.JSON(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        *_bookkeeping_columns(),
        sa.CheckConstraint("name != ''", name="ck_spot_non_empty_name"),
        sa.PrimaryKeyConstraint("id"),
    )
    _live_name_index("spots")


def downgrade() -> None:
    """Downgrade schema."""
    for table in ("spots", "plans", "tags", "keywords"):
        op.drop_index(f"uq_{table}_live_name", table_name=table)
        op.drop_table(table)
