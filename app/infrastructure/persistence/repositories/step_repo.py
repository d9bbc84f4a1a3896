"""Workflow step repository. Stored JSON is parsed leniently into step entities."""

from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services.step_definition_parser import parse_actions, parse_conditions
from app.domain.entities.workflow import ConditionSet, RouteAction, WorkflowStepEntity
from app.infrastructure.persistence.models.workflow import WorkflowStep
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _step_to_entity(s: WorkflowStep) -> WorkflowStepEntity:
    """Map ORM WorkflowStep to WorkflowStepEntity (malformed JSON only narrows matching)."""
    return WorkflowStepEntity(
        id=s.id,
        workflow_id=s.workflow_id,
        name=s.name,
        step_order=s.step_order,
        conditions=parse_conditions(s.conditions, strict=False),
        action=parse_actions(s.actions, strict=False),
        created_at=ensure_utc(s.created_at),
    )


class WorkflowStepRepository(BaseRepository[WorkflowStep]):
    """Workflow step repository (implements IWorkflowStepRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowStep)

    async def list_steps(self, workflow_id: str) -> list[WorkflowStepEntity]:
        result = await self.db.execute(
            select(WorkflowStep)
            .where(WorkflowStep.workflow_id == workflow_id)
            .order_by(
                WorkflowStep.step_order.asc(),
                WorkflowStep.created_at.asc(),
                WorkflowStep.id.asc(),
            )
        )
        return [_step_to_entity(s) for s in result.scalars().all()]

    async def _get_orm(self, step_id: str, workflow_id: str) -> WorkflowStep | None:
        result = await self.db.execute(
            select(WorkflowStep).where(
                WorkflowStep.id == step_id,
                WorkflowStep.workflow_id == workflow_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_id_and_workflow(
        self, step_id: str, workflow_id: str
    ) -> WorkflowStepEntity | None:
        orm = await self._get_orm(step_id, workflow_id)
        return _step_to_entity(orm) if orm else None

    async def max_step_order(self, workflow_id: str) -> int | None:
        result = await self.db.execute(
            select(func.max(WorkflowStep.step_order)).where(
                WorkflowStep.workflow_id == workflow_id
            )
        )
        return result.scalar_one_or_none()

    async def count_by_workflow(self, workflow_id: str) -> int:
        result = await self.db.execute(
            select(func.count(WorkflowStep.id)).where(
                WorkflowStep.workflow_id == workflow_id
            )
        )
        return result.scalar_one() or 0

    async def create_step(
        self,
        workflow_id: str,
        name: str,
        step_order: int,
        conditions: ConditionSet,
        action: RouteAction,
    ) -> WorkflowStepEntity:
        step = WorkflowStep(
            workflow_id=workflow_id,
            name=name,
            step_order=step_order,
            conditions=conditions.to_dict(),
            actions=[action.to_dict()],
        )
        return _step_to_entity(await self.create(step))

    async def update_step(
        self,
        step_id: str,
        *,
        name: str | None = None,
        conditions: ConditionSet | None = None,
        action: RouteAction | None = None,
        step_order: int | None = None,
    ) -> WorkflowStepEntity | None:
        orm = await super().get_by_id(step_id)
        if not orm:
            return None
        if name is not None:
            orm.name = name
        if conditions is not None:
            orm.conditions = conditions.to_dict()
        if action is not None:
            orm.actions = [action.to_dict()]
        if step_order is not None:
            orm.step_order = step_order
        return _step_to_entity(await self.save(orm))

    async def delete_step(self, step_id: str) -> bool:
        orm = await super().get_by_id(step_id)
        if not orm:
            return False
        await self.delete(orm)
        return True

    async def set_step_orders(self, orders: dict[str, int]) -> None:
        for step_id, step_order in orders.items():
            await self.db.execute(
                update(WorkflowStep)
                .where(WorkflowStep.id == step_id)
                .values(step_order=step_order)
            )
        await self.db.flush()
