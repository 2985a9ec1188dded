"""Initial schema — infos table.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "infos",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("desc", sa.Text, nullable=True),
        sa.Column("is_complete", sa.Boolean, nullable=True),
        sa.Column("remind_at_address", sa.Text, nullable=True),
        sa.Column("remind_at_geo", sa.String(64), nullable=True),
        sa.Column("tag", sa.JSON(none_as_null=True), nullable=True),
    )
    op.create_index("idx_infos_is_complete", "infos", ["is_complete"])


def downgrade() -> None:
    op.drop_index("idx_infos_is_complete", table_name="infos")
    op.drop_table("infos")
