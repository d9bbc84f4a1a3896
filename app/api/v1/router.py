"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import health, workflow_entry, workflow_steps, workflows

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(workflows.router, prefix="/workflows", tags=["workflows"])
api_router.include_router(
    workflow_steps.router, prefix="/workflows", tags=["workflow-steps"]
)
api_router.include_router(
    workflow_entry.router, prefix="/workflow-entry", tags=["workflow-entry"]
)
