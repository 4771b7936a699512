"""create categories and audios tables

Revision ID: a1c4e7f20b93
Revises:
Create Date: 2026-10-18

Two-level category hierarchy plus the category columns of audios.
Sibling names are unique; primaries share one sibling group via COALESCE.
"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

revision: str = "a1c4e7f20b93"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(length=7), nullable=True),
        sa.Column("icon", sa.String(length=16), nullable=True),
        sa.Column("parent_id", sa.String(), nullable=True),
        sa.Column("level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["parent_id"], ["categories.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "(level = 1 AND parent_id IS NULL) OR (level = 2 AND parent_id IS NOT NULL)",
            name="ck_categories_level_parent",
        ),
    )
    op.create_index("ix_categories_parent_id", "categories", ["parent_id"], unique=False)
    op.create_index(
        "ix_categories_level_sort", "categories", ["level", "sort_order"], unique=False
    )
    op.create_index(
        "uq_categories_name_parent",
        "categories",
        ["name", sa.text("COALESCE(parent_id, '')")],
        unique=True,
    )

    op.create_table(
        "audios",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("subject", sa.String(length=100), nullable=True),
        sa.Column("category_id", sa.String(), nullable=True),
        sa.Column("subcategory_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(
            ["subcategory_id"], ["categories.id"], ondelete="SET NULL"
        ),
    )
    op.create_index("ix_audios_category_id", "audios", ["category_id"], unique=False)
    op.create_index(
        "ix_audios_subcategory_id", "audios", ["subcategory_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_audios_subcategory_id", table_name="audios")
    op.drop_index("ix_audios_category_id", table_name="audios")
    op.drop_table("audios")
    op.drop_index("uq_categories_name_parent", table_name="categories")
    op.drop_index("ix_categories_level_sort", table_name="categories")
    op.drop_index("ix_categories_parent_id", table_name="categories")
    op.drop_table("categories")
