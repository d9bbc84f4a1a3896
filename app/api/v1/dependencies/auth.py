"""Bearer-token authentication dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.domain.exceptions import AuthenticationException
from app.infrastructure.security.jwt import user_id_from_token
from app.shared.context import set_current_user

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_user_id_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str | None:
    """Return the user id from a valid bearer token, else None."""
    if not credentials:
        return None
    try:
        return user_id_from_token(credentials.credentials)
    except ValueError:
        return None


async def get_current_user_id(
    user_id: Annotated[str | None, Depends(get_current_user_id_optional)],
) -> str:
    """Return the authenticated user id; raise 401 if missing or invalid."""
    if user_id is None:
        raise AuthenticationException("Not authenticated")
    set_current_user(user_id)
    return user_id
