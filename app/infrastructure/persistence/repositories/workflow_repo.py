"""Workflow repository. Returns domain entities. Team-scoped lookups."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities.workflow import WorkflowEntity
from app.infrastructure.persistence.models.workflow import Workflow
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _workflow_to_entity(w: Workflow) -> WorkflowEntity:
    """Map ORM Workflow to WorkflowEntity (without steps)."""
    return WorkflowEntity(
        id=w.id,
        team_id=w.team_id,
        name=w.name,
        description=w.description,
        is_active=w.is_active,
        entry_link_id=w.entry_link_id,
        created_at=ensure_utc(w.created_at),
    )


class WorkflowRepository(BaseRepository[Workflow]):
    """Workflow repository (implements IWorkflowRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Workflow)

    async def get_by_id(self, workflow_id: str) -> WorkflowEntity | None:
        orm = await super().get_by_id(workflow_id)
        return _workflow_to_entity(orm) if orm else None

    async def _get_orm(self, workflow_id: str, team_id: str) -> Workflow | None:
        result = await self.db.execute(
            select(Workflow).where(
                Workflow.id == workflow_id,
                Workflow.team_id == team_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_id_and_team(
        self, workflow_id: str, team_id: str
    ) -> WorkflowEntity | None:
        orm = await self._get_orm(workflow_id, team_id)
        return _workflow_to_entity(orm) if orm else None

    async def get_by_entry_link(self, entry_link_id: str) -> WorkflowEntity | None:
        result = await self.db.execute(
            select(Workflow).where(Workflow.entry_link_id == entry_link_id)
        )
        orm = result.scalar_one_or_none()
        return _workflow_to_entity(orm) if orm else None

    async def list_by_team(
        self, team_id: str, skip: int = 0, limit: int = 100
    ) -> list[WorkflowEntity]:
        result = await self.db.execute(
            select(Workflow)
            .where(Workflow.team_id == team_id)
            .order_by(Workflow.created_at.desc(), Workflow.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [_workflow_to_entity(w) for w in result.scalars().all()]

    async def create_workflow(
        self,
        team_id: str,
        name: str,
        description: str | None,
        entry_link_id: str,
    ) -> WorkflowEntity:
        """Create an active workflow; return created entity."""
        workflow = Workflow(
            team_id=team_id,
            name=name,
            description=description,
            is_active=True,
            entry_link_id=entry_link_id,
        )
        return _workflow_to_entity(await self.create(workflow))

    async def update_workflow(
        self,
        workflow_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
    ) -> WorkflowEntity | None:
        orm = await super().get_by_id(workflow_id)
        if not orm:
            return None
        if name is not None:
            orm.name = name
        if description is not None:
            orm.description = description.strip() or None
        if is_active is not None:
            orm.is_active = is_active
        return _workflow_to_entity(await self.save(orm))

    async def delete_workflow(self, workflow_id: str) -> bool:
        orm = await super().get_by_id(workflow_id)
        if not orm:
            return False
        await self.delete(orm)
        return True
