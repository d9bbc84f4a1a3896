"""Team repository: plan lookup and membership checks."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities.team import TeamEntity
from app.infrastructure.persistence.models.team import Team, UserTeam
from app.infrastructure.persistence.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    """Team repository (implements ITeamRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Team)

    async def get_by_id(self, team_id: str) -> TeamEntity | None:
        orm = await super().get_by_id(team_id)
        return TeamEntity(id=orm.id, name=orm.name, plan=orm.plan) if orm else None

    async def is_member(self, team_id: str, user_id: str) -> bool:
        result = await self.db.execute(
            select(UserTeam.user_id).where(
                UserTeam.team_id == team_id,
                UserTeam.user_id == user_id,
            )
        )
        return result.first() is not None
