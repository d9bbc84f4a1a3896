"""Pydantic request/response schemas for the API."""

from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.workflow import (
    RouteRequest,
    RouteResponse,
    WorkflowActiveRequest,
    WorkflowCreateRequest,
    WorkflowExecutionResponse,
    WorkflowResponse,
    WorkflowStepCreateRequest,
    WorkflowStepReorderRequest,
    WorkflowStepResponse,
    WorkflowStepUpdateRequest,
    WorkflowUpdateRequest,
)
from app.schemas.workflow_entry import (
    EntryAccessRequest,
    EntryAccessResponse,
    EntryVerifyRequest,
    EntryVerifyResponse,
)

__all__ = [
    "EntryAccessRequest",
    "EntryAccessResponse",
    "EntryVerifyRequest",
    "EntryVerifyResponse",
    "HealthResponse",
    "ReadinessResponse",
    "RouteRequest",
    "RouteResponse",
    "WorkflowActiveRequest",
    "WorkflowCreateRequest",
    "WorkflowExecutionResponse",
    "WorkflowResponse",
    "WorkflowStepCreateRequest",
    "WorkflowStepReorderRequest",
    "WorkflowStepResponse",
    "WorkflowStepUpdateRequest",
    "WorkflowUpdateRequest",
]
