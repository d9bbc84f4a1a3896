"""Workflow API: thin routes delegating to WorkflowService and WorkflowRouter."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from app.api.v1.dependencies import (
    get_team_id,
    get_workflow_router,
    get_workflow_service,
    get_workflow_service_for_write,
)
from app.application.dtos.workflow import WorkflowCreate, WorkflowUpdate
from app.application.services.workflow_router import WorkflowRouter
from app.application.use_cases.workflows import WorkflowService
from app.core.limiter import limit_writes
from app.domain.value_objects.core import VisitorIdentity
from app.schemas.workflow import (
    RouteRequest,
    RouteResponse,
    WorkflowActiveRequest,
    WorkflowCreateRequest,
    WorkflowExecutionResponse,
    WorkflowResponse,
    WorkflowUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=list[WorkflowResponse])
async def list_workflows(
    team_id: Annotated[str, Depends(get_team_id)],
    service: WorkflowService = Depends(get_workflow_service),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    """List the team's workflows, newest first."""
    summaries = await service.list_workflows(team_id, skip=skip, limit=limit)
    return [WorkflowResponse.from_summary(s) for s in summaries]


@router.post("", response_model=WorkflowResponse, status_code=201)
@limit_writes
async def create_workflow(
    request: Request,
    body: WorkflowCreateRequest,
    team_id: Annotated[str, Depends(get_team_id)],
    service: WorkflowService = Depends(get_workflow_service_for_write),
):
    """Create a workflow and its email-gated entry link."""
    summary = await service.create_workflow(
        team_id,
        WorkflowCreate(
            name=body.name,
            description=body.description,
            domain=body.domain,
            slug=body.slug,
        ),
    )
    return WorkflowResponse.from_summary(summary)


@router.get("/{workflow_id}", response_model=WorkflowResponse)
async def get_workflow(
    workflow_id: str,
    team_id: Annotated[str, Depends(get_team_id)],
    service: WorkflowService = Depends(get_workflow_service),
):
    """Get a workflow with its steps in evaluation order."""
    summary = await service.get_workflow(team_id, workflow_id)
    return WorkflowResponse.from_summary(summary, include_steps=True)


@router.patch("/{workflow_id}", response_model=WorkflowResponse)
@limit_writes
async def update_workflow(
    request: Request,
    workflow_id: str,
    body: WorkflowUpdateRequest,
    team_id: Annotated[str, Depends(get_team_id)],
    service: WorkflowService = Depends(get_workflow_service_for_write),
):
    """Update name, description or active flag.

    An explicit "description": null (or "") clears the description; omitting
    the field leaves it unchanged.
    """
    description = body.description
    if description is None and "description" in body.model_fields_set:
        description = ""
    summary = await service.update_workflow(
        team_id,
        workflow_id,
        WorkflowUpdate(name=body.name, description=description, is_active=body.is_active),
    )
    return WorkflowResponse.from_summary(summary)


@router.put("/{workflow_id}/active", response_model=WorkflowResponse)
@limit_writes
async def set_workflow_active(
    request: Request,
    workflow_id: str,
    body: WorkflowActiveRequest,
    team_id: Annotated[str, Depends(get_team_id)],
    service: WorkflowService = Depends(get_workflow_service_for_write),
):
    """Enable or disable routing for a workflow."""
    summary = await service.set_active(team_id, workflow_id, body.is_active)
    return WorkflowResponse.from_summary(summary)


@router.delete("/{workflow_id}", status_code=204)
@limit_writes
async def delete_workflow(
    request: Request,
    workflow_id: str,
    team_id: Annotated[str, Depends(get_team_id)],
    service: WorkflowService = Depends(get_workflow_service_for_write),
):
    """Delete a workflow; its entry link is archived and its slug freed."""
    await service.delete_workflow(team_id, workflow_id)
    return Response(status_code=204)


@router.get(
    "/{workflow_id}/executions",
    response_model=list[WorkflowExecutionResponse],
)
async def list_workflow_executions(
    workflow_id: str,
    team_id: Annotated[str, Depends(get_team_id)],
    service: WorkflowService = Depends(get_workflow_service),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    """Entry resolutions recorded for a workflow, newest first."""
    executions = await service.list_executions(
        team_id, workflow_id, skip=skip, limit=limit
    )
    return [WorkflowExecutionResponse.from_result(e) for e in executions]


@router.post("/{workflow_id}/route", response_model=RouteResponse)
async def route_visitor(
    workflow_id: str,
    body: RouteRequest,
    team_id: Annotated[str, Depends(get_team_id)],
    service: WorkflowService = Depends(get_workflow_service),
    workflow_router: WorkflowRouter = Depends(get_workflow_router),
):
    """Dry run: show where a visitor with this email would be routed.

    Nothing is recorded. Steps are evaluated exactly as on the entry link.
    """
    await service.get_workflow(team_id, workflow_id)
    visitor = VisitorIdentity.from_email(str(body.email) if body.email else None)
    decision = await workflow_router.route(workflow_id, visitor)
    return RouteResponse.from_decision(decision)
