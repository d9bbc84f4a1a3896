"""Workflow, WorkflowStep and WorkflowExecution ORM models. Visitor routing."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import WorkflowExecutionStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TeamScopedModel,
    TimestampMixin,
)


class Workflow(TeamScopedModel, Base):
    """Workflow definition. Table: workflow. One entry link, ordered steps."""

    __tablename__ = "workflow"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.text("true")
    )
    entry_link_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("link.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )

    __table_args__ = (Index("ix_workflow_team_created", "team_id", "created_at"),)


class WorkflowStep(CuidMixin, TimestampMixin, Base):
    """Routing step. Table: workflow_step. Conditions and actions as JSON."""

    __tablename__ = "workflow_step"

    workflow_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    step_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    conditions: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    actions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        Index("ix_workflow_step_workflow_order", "workflow_id", "step_order"),
    )


class WorkflowExecution(CuidMixin, Base):
    """Entry resolution audit. Table: workflow_execution."""

    __tablename__ = "workflow_execution"

    workflow_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    visitor_email: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default=WorkflowExecutionStatus.COMPLETED.value,
        index=True,
    )
    matched: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    target_link_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("link.id", ondelete="SET NULL"), nullable=True
    )
    execution_log: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSON, nullable=True
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index("ix_workflow_execution_workflow_started", "workflow_id", "started_at"),
        CheckConstraint(
            "status IN ({})".format(
                ", ".join(
                    "'{}'".format(v.replace("'", "''"))
                    for v in WorkflowExecutionStatus.values()
                )
            ),
            name="workflow_execution_status_check",
        ),
    )
