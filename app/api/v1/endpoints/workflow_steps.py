"""Workflow step API: ordered routing steps of a workflow."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import (
    get_step_service,
    get_step_service_for_write,
    get_team_id,
)
from app.application.dtos.workflow import StepDraft, StepPatch
from app.application.use_cases.workflows import WorkflowStepService
from app.core.limiter import limit_writes
from app.schemas.workflow import (
    WorkflowStepCreateRequest,
    WorkflowStepReorderRequest,
    WorkflowStepResponse,
    WorkflowStepUpdateRequest,
)

router = APIRouter()


@router.get("/{workflow_id}/steps", response_model=list[WorkflowStepResponse])
async def list_steps(
    workflow_id: str,
    team_id: Annotated[str, Depends(get_team_id)],
    service: WorkflowStepService = Depends(get_step_service),
):
    """Steps in evaluation order (first match wins)."""
    steps = await service.list_steps(team_id, workflow_id)
    return [WorkflowStepResponse.from_entity(s) for s in steps]


@router.post(
    "/{workflow_id}/steps", response_model=WorkflowStepResponse, status_code=201
)
@limit_writes
async def create_step(
    request: Request,
    workflow_id: str,
    body: WorkflowStepCreateRequest,
    team_id: Annotated[str, Depends(get_team_id)],
    service: WorkflowStepService = Depends(get_step_service_for_write),
):
    """Append a step; the target link's allow list is replaced to match it."""
    step = await service.create_step(
        team_id,
        workflow_id,
        StepDraft(
            name=body.name,
            actions=body.actions,
            conditions=body.conditions,
            allow_list=body.allow_list,
        ),
    )
    return WorkflowStepResponse.from_entity(step)


@router.put(
    "/{workflow_id}/steps", response_model=list[WorkflowStepResponse]
)
@limit_writes
async def reorder_steps(
    request: Request,
    workflow_id: str,
    body: WorkflowStepReorderRequest,
    team_id: Annotated[str, Depends(get_team_id)],
    service: WorkflowStepService = Depends(get_step_service_for_write),
):
    """Renumber steps following the given id order."""
    steps = await service.reorder_steps(team_id, workflow_id, body.step_ids)
    return [WorkflowStepResponse.from_entity(s) for s in steps]


@router.patch(
    "/{workflow_id}/steps/{step_id}", response_model=WorkflowStepResponse
)
@limit_writes
async def update_step(
    request: Request,
    workflow_id: str,
    step_id: str,
    body: WorkflowStepUpdateRequest,
    team_id: Annotated[str, Depends(get_team_id)],
    service: WorkflowStepService = Depends(get_step_service_for_write),
):
    """Partial step update."""
    step = await service.update_step(
        team_id,
        workflow_id,
        step_id,
        StepPatch(
            name=body.name,
            conditions=body.conditions,
            allow_list=body.allow_list,
            actions=body.actions,
            step_order=body.step_order,
        ),
    )
    return WorkflowStepResponse.from_entity(step)


@router.delete("/{workflow_id}/steps/{step_id}", status_code=204)
@limit_writes
async def delete_step(
    request: Request,
    workflow_id: str,
    step_id: str,
    team_id: Annotated[str, Depends(get_team_id)],
    service: WorkflowStepService = Depends(get_step_service_for_write),
):
    """Delete a step. Other steps keep their order."""
    await service.delete_step(team_id, workflow_id, step_id)
    return Response(status_code=204)
