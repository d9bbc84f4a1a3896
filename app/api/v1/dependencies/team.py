"""Team-scoping dependencies (composition root).

Admin routes act on the team named in the X-Team-ID header. The caller
must be a member of that team.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.domain.exceptions import AuthorizationException, ResourceNotFoundException
from app.domain.value_objects.core import is_valid_id
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import TeamRepository

from .auth import get_current_user_id


async def get_team_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TeamRepository:
    """Team repository for read operations."""
    return TeamRepository(db)


async def get_team_id(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    team_repo: Annotated[TeamRepository, Depends(get_team_repo)],
) -> str:
    """Resolve team ID from header, check it exists and the caller is a member."""
    name = get_settings().team_header_name
    value = request.headers.get(name)
    if not value:
        raise HTTPException(
            status_code=400,
            detail=f"Missing required header: {name}",
        )
    if not is_valid_id(value):
        raise HTTPException(
            status_code=400,
            detail="Invalid team ID format",
        )
    team = await team_repo.get_by_id(value)
    if not team:
        raise ResourceNotFoundException("team", value)
    if not await team_repo.is_member(value, user_id):
        raise AuthorizationException("team", "access")
    return value
