"""add_workflow_entry_code

Revision ID: c5e1d8a4f7b3
Revises: a7c3e9f1b2d4
Create Date: 2026-10-19 10:41:07.518302

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "c5e1d8a4f7b3"
down_revision: Union[str, Sequence[str], None] = "a7c3e9f1b2d4"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "workflow_entry_code",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("identifier", sa.String(), nullable=False),
        sa.Column("code_hash", sa.String(length=64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_workflow_entry_code_identifier"),
        "workflow_entry_code",
        ["identifier"],
        unique=False,
    )
    op.create_index(
        "ix_workflow_entry_code_identifier_hash",
        "workflow_entry_code",
        ["identifier", "code_hash"],
        unique=True,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_workflow_entry_code_identifier_hash", table_name="workflow_entry_code")
    op.drop_index(op.f("ix_workflow_entry_code_identifier"), table_name="workflow_entry_code")
    op.drop_table("workflow_entry_code")
