"""initial_workflow_routing_schema

Revision ID: a7c3e9f1b2d4
Revises:
Create Date: 2026-10-18 09:12:44.201733

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a7c3e9f1b2d4"
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
    """Upgrade schema."""
    op.create_table(
        "team",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("plan", sa.String(), server_default=sa.text("'free'"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_email"), "user", ["email"], unique=True)
    op.create_table(
        "user_team",
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("team_id", sa.String(), nullable=False),
        sa.Column("role", sa.String(), server_default=sa.text("'MEMBER'"), nullable=False),
        sa.ForeignKeyConstraint(["team_id"], ["team.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "team_id"),
        sa.UniqueConstraint("user_id", "team_id", name="uq_user_team"),
    )
    op.create_index(op.f("ix_user_team_team_id"), "user_team", ["team_id"], unique=False)

    op.create_table(
        "domain",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("team_id", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["team_id"], ["team.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_domain_slug"), "domain", ["slug"], unique=True)
    op.create_index(op.f("ix_domain_team_id"), "domain", ["team_id"], unique=False)

    op.create_table(
        "link",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("team_id", sa.String(), nullable=False),
        sa.Column("link_type", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("document_id", sa.String(), nullable=True),
        sa.Column("dataroom_id", sa.String(), nullable=True),
        sa.Column("domain_id", sa.String(), nullable=True),
        sa.Column("domain_slug", sa.String(), nullable=True),
        sa.Column("slug", sa.String(), nullable=True),
        sa.Column("email_protected", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("email_authenticated", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("allow_list", sa.JSON(), server_default=sa.text("'[]'"), nullable=False),
        sa.Column("is_archived", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "link_type IN ('DOCUMENT_LINK', 'DATAROOM_LINK', 'WORKFLOW_LINK')",
            name="link_type_check",
        ),
        sa.ForeignKeyConstraint(["domain_id"], ["domain.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["team_id"], ["team.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("domain_slug", "slug", name="uq_link_domain_slug_slug"),
    )
    op.create_index(op.f("ix_link_team_id"), "link", ["team_id"], unique=False)
    op.create_index(op.f("ix_link_link_type"), "link", ["link_type"], unique=False)
    op.create_index(op.f("ix_link_document_id"), "link", ["document_id"], unique=False)
    op.create_index(op.f("ix_link_dataroom_id"), "link", ["dataroom_id"], unique=False)
    op.create_index(op.f("ix_link_deleted_at"), "link", ["deleted_at"], unique=False)

    op.create_table(
        "workflow",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("team_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("entry_link_id", sa.String(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["entry_link_id"], ["link.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["team_id"], ["team.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("entry_link_id"),
    )
    op.create_index(op.f("ix_workflow_team_id"), "workflow", ["team_id"], unique=False)
    op.create_index("ix_workflow_team_created", "workflow", ["team_id", "created_at"], unique=False)

    op.create_table(
        "workflow_step",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("workflow_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("step_order", sa.Integer(), nullable=False),
        sa.Column("conditions", sa.JSON(), nullable=False),
        sa.Column("actions", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["workflow_id"], ["workflow.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_workflow_step_workflow_order",
        "workflow_step",
        ["workflow_id", "step_order"],
        unique=False,
    )

    op.create_table(
        "workflow_execution",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("workflow_id", sa.String(), nullable=False),
        sa.Column("visitor_email", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("matched", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("target_link_id", sa.String(), nullable=True),
        sa.Column("execution_log", sa.JSON(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('completed', 'failed')",
            name="workflow_execution_status_check",
        ),
        sa.ForeignKeyConstraint(["target_link_id"], ["link.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["workflow_id"], ["workflow.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_workflow_execution_workflow_id"),
        "workflow_execution",
        ["workflow_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_workflow_execution_status"), "workflow_execution", ["status"], unique=False
    )
    op.create_index(
        "ix_workflow_execution_workflow_started",
        "workflow_execution",
        ["workflow_id", "started_at"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("workflow_execution")
    op.drop_table("workflow_step")
    op.drop_table("workflow")
    op.drop_table("link")
    op.drop_table("domain")
    op.drop_table("user_team")
    op.drop_table("user")
    op.drop_table("team")
