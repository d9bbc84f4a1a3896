"""Workflow execution repository. Returns application DTOs."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.workflow import WorkflowExecutionCreate, WorkflowExecutionResult
from app.infrastructure.persistence.models.workflow import WorkflowExecution
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _execution_to_result(e: WorkflowExecution) -> WorkflowExecutionResult:
    """Map ORM WorkflowExecution to application WorkflowExecutionResult."""
    return WorkflowExecutionResult(
        id=e.id,
        workflow_id=e.workflow_id,
        visitor_email=e.visitor_email,
        status=e.status,
        matched=e.matched,
        target_link_id=e.target_link_id,
        execution_log=e.execution_log or [],
        error_message=e.error_message,
        started_at=ensure_utc(e.started_at),
        completed_at=ensure_utc(e.completed_at),
    )


class WorkflowExecutionRepository(BaseRepository[WorkflowExecution]):
    """Workflow execution repository (implements IWorkflowExecutionRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowExecution)

    async def record(self, data: WorkflowExecutionCreate) -> WorkflowExecutionResult:
        execution = WorkflowExecution(
            workflow_id=data.workflow_id,
            visitor_email=data.visitor_email,
            status=data.status,
            matched=data.matched,
            target_link_id=data.target_link_id,
            execution_log=data.execution_log,
            error_message=data.error_message,
            started_at=data.started_at,
            completed_at=data.completed_at,
        )
        return _execution_to_result(await self.create(execution))

    async def list_by_workflow(
        self, workflow_id: str, skip: int = 0, limit: int = 100
    ) -> list[WorkflowExecutionResult]:
        result = await self.db.execute(
            select(WorkflowExecution)
            .where(WorkflowExecution.workflow_id == workflow_id)
            .order_by(WorkflowExecution.started_at.desc(), WorkflowExecution.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [_execution_to_result(e) for e in result.scalars().all()]
