"""FastAPI dependencies (composition root). Re-exports for routes."""

from .auth import get_current_user_id, get_current_user_id_optional
from .db import get_db, get_db_transactional
from .team import get_team_id, get_team_repo
from .workflow import (
    get_entry_code_notifier,
    get_entry_resolver,
    get_step_service,
    get_step_service_for_write,
    get_workflow_router,
    get_workflow_service,
    get_workflow_service_for_write,
)

__all__ = [
    "get_current_user_id",
    "get_current_user_id_optional",
    "get_db",
    "get_db_transactional",
    "get_entry_code_notifier",
    "get_entry_resolver",
    "get_step_service",
    "get_step_service_for_write",
    "get_team_id",
    "get_team_repo",
    "get_workflow_router",
    "get_workflow_service",
    "get_workflow_service_for_write",
]
