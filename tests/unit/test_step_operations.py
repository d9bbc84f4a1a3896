"""WorkflowStepService unit tests with mocked repos."""

from dataclasses import replace
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.workflow import StepDraft, StepPatch
from app.application.use_cases.workflows import WorkflowStepService
from app.domain.entities.workflow import RouteAction
from app.domain.enums import LinkType
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from tests.factories import (
    OTHER_TEAM_ID,
    TEAM_ID,
    WORKFLOW_ID,
    domains,
    emails,
    make_link,
    make_step,
    make_workflow,
)

TARGET = "clinka000000000000000001"
STEP_1 = "cstep1000000000000000001"
STEP_2 = "cstep2000000000000000001"
STEP_3 = "cstep3000000000000000001"

ROUTE = [{"type": "route", "target_link_id": TARGET}]


@pytest.fixture
def repos():
    """Workflow, step and link repos for a team with one workflow and one document link."""
    workflow_repo = AsyncMock()
    workflow_repo.get_by_id_and_team = AsyncMock(return_value=make_workflow())
    step_repo = AsyncMock()
    step_repo.max_step_order = AsyncMock(return_value=None)
    step_repo.list_steps = AsyncMock(return_value=[])

    async def create_step(workflow_id, name, step_order, conditions, action):
        return make_step(STEP_1, step_order, conditions, action.target_link_id)

    step_repo.create_step = AsyncMock(side_effect=create_step)
    link_repo = AsyncMock()
    link_repo.resolve_link = AsyncMock(
        return_value=make_link(TARGET, document_id="cdocument0001")
    )
    service = WorkflowStepService(workflow_repo, step_repo, link_repo)
    return service, workflow_repo, step_repo, link_repo


class TestCreateStep:
    async def test_first_step_gets_order_zero_and_syncs_allow_list(self, repos) -> None:
        service, _, step_repo, link_repo = repos
        step = await service.create_step(
            TEAM_ID,
            WORKFLOW_ID,
            StepDraft(name=" Investors ", actions=ROUTE, allow_list=["Jane@Acme.com", "@partner.io"]),
        )

        assert step.step_order == 0
        kwargs = step_repo.create_step.call_args.kwargs
        assert kwargs["name"] == "Investors"
        assert kwargs["step_order"] == 0
        assert kwargs["action"] == RouteAction(
            target_link_id=TARGET, target_document_id="cdocument0001"
        )
        link_repo.resolve_link.assert_awaited_once_with(TARGET, TEAM_ID)
        link_repo.set_allow_list.assert_awaited_once_with(
            TARGET, ["jane@acme.com", "@partner.io"]
        )

    async def test_appends_after_current_max(self, repos) -> None:
        service, _, step_repo, _ = repos
        step_repo.max_step_order = AsyncMock(return_value=4)
        await service.create_step(
            TEAM_ID,
            WORKFLOW_ID,
            StepDraft(
                name="VIPs",
                actions=ROUTE,
                conditions={"logic": "OR", "items": [{"type": "email", "value": ["vip@guest.com"]}]},
            ),
        )
        assert step_repo.create_step.call_args.kwargs["step_order"] == 5

    async def test_malformed_ids_rejected_before_repository_calls(self, repos) -> None:
        service, workflow_repo, step_repo, link_repo = repos
        draft = StepDraft(name="x", actions=ROUTE, allow_list=["a@b.com"])
        for team_id, workflow_id in (("bad team", WORKFLOW_ID), (TEAM_ID, "'; drop table")):
            with pytest.raises(ValidationException):
                await service.create_step(team_id, workflow_id, draft)
        workflow_repo.get_by_id_and_team.assert_not_awaited()
        step_repo.create_step.assert_not_awaited()
        link_repo.resolve_link.assert_not_awaited()

    async def test_conditions_required(self, repos) -> None:
        service, _, step_repo, _ = repos
        with pytest.raises(ValidationException) as exc_info:
            await service.create_step(TEAM_ID, WORKFLOW_ID, StepDraft(name="x", actions=ROUTE))
        assert exc_info.value.details == {"field": "conditions"}
        step_repo.create_step.assert_not_awaited()

    async def test_conditions_and_allow_list_are_exclusive(self, repos) -> None:
        service, _, _, _ = repos
        with pytest.raises(ValidationException, match="not both"):
            await service.create_step(
                TEAM_ID,
                WORKFLOW_ID,
                StepDraft(
                    name="x",
                    actions=ROUTE,
                    conditions={"items": [{"type": "domain", "value": ["acme.com"]}]},
                    allow_list=["@acme.com"],
                ),
            )

    async def test_empty_name_rejected(self, repos) -> None:
        service, _, _, _ = repos
        with pytest.raises(ValidationException) as exc_info:
            await service.create_step(
                TEAM_ID, WORKFLOW_ID, StepDraft(name="  ", actions=ROUTE, allow_list=["a@b.com"])
            )
        assert exc_info.value.details == {"field": "name"}

    async def test_unknown_workflow_raises_not_found(self, repos) -> None:
        service, workflow_repo, _, _ = repos
        workflow_repo.get_by_id_and_team = AsyncMock(return_value=None)
        with pytest.raises(ResourceNotFoundException):
            await service.create_step(
                TEAM_ID, WORKFLOW_ID, StepDraft(name="x", actions=ROUTE, allow_list=["a@b.com"])
            )

    @pytest.mark.parametrize(
        "target",
        [
            None,
            make_link(TARGET, team_id=OTHER_TEAM_ID),
            make_link(TARGET, link_type=LinkType.WORKFLOW_LINK),
        ],
    )
    async def test_target_must_be_routable_link_of_team(self, repos, target) -> None:
        service, _, step_repo, link_repo = repos
        link_repo.resolve_link = AsyncMock(return_value=target)
        with pytest.raises(ValidationException) as exc_info:
            await service.create_step(
                TEAM_ID, WORKFLOW_ID, StepDraft(name="x", actions=ROUTE, allow_list=["a@b.com"])
            )
        assert exc_info.value.details == {"field": "actions"}
        step_repo.create_step.assert_not_awaited()
        link_repo.set_allow_list.assert_not_awaited()


class TestUpdateStep:
    async def test_conditions_change_syncs_existing_target(self, repos) -> None:
        service, _, step_repo, link_repo = repos
        existing = make_step(STEP_1, 2, domains("acme.com"), TARGET)
        step_repo.get_by_id_and_workflow = AsyncMock(return_value=existing)
        step_repo.update_step = AsyncMock(return_value=replace(existing, conditions=emails("a@b.com")))

        await service.update_step(
            TEAM_ID, WORKFLOW_ID, STEP_1, StepPatch(allow_list=["A@b.com"])
        )

        kwargs = step_repo.update_step.call_args.kwargs
        assert kwargs["step_order"] is None
        assert kwargs["action"] is None
        link_repo.resolve_link.assert_not_awaited()
        link_repo.set_allow_list.assert_awaited_once_with(TARGET, ["a@b.com"])

    async def test_rename_only_keeps_order_and_allow_list(self, repos) -> None:
        service, _, step_repo, link_repo = repos
        existing = make_step(STEP_1, 2, domains("acme.com"), TARGET)
        step_repo.get_by_id_and_workflow = AsyncMock(return_value=existing)
        step_repo.update_step = AsyncMock(return_value=replace(existing, name="Renamed"))

        updated = await service.update_step(
            TEAM_ID, WORKFLOW_ID, STEP_1, StepPatch(name="Renamed")
        )

        assert updated.step_order == 2
        step_repo.update_step.assert_awaited_once_with(
            STEP_1, name="Renamed", conditions=None, action=None, step_order=None
        )
        link_repo.set_allow_list.assert_not_awaited()

    async def test_new_target_gets_existing_conditions(self, repos) -> None:
        service, _, step_repo, link_repo = repos
        existing = make_step(STEP_1, 0, domains("acme.com"), "clinkold0000000000000001")
        step_repo.get_by_id_and_workflow = AsyncMock(return_value=existing)
        step_repo.update_step = AsyncMock(return_value=existing)

        await service.update_step(TEAM_ID, WORKFLOW_ID, STEP_1, StepPatch(actions=ROUTE))

        link_repo.set_allow_list.assert_awaited_once_with(TARGET, ["@acme.com"])

    async def test_unknown_step_raises_not_found(self, repos) -> None:
        service, _, step_repo, _ = repos
        step_repo.get_by_id_and_workflow = AsyncMock(return_value=None)
        with pytest.raises(ResourceNotFoundException):
            await service.update_step(TEAM_ID, WORKFLOW_ID, STEP_1, StepPatch(name="x"))
        step_repo.update_step.assert_not_awaited()

    async def test_malformed_step_id_rejected_before_repository_calls(self, repos) -> None:
        service, workflow_repo, step_repo, _ = repos
        with pytest.raises(ValidationException):
            await service.update_step(TEAM_ID, WORKFLOW_ID, "STEP-1", StepPatch(name="x"))
        workflow_repo.get_by_id_and_team.assert_not_awaited()
        step_repo.get_by_id_and_workflow.assert_not_awaited()


class TestDeleteAndReorder:
    async def test_delete_does_not_renumber(self, repos) -> None:
        service, _, step_repo, _ = repos
        step_repo.get_by_id_and_workflow = AsyncMock(
            return_value=make_step(STEP_2, 1, domains("acme.com"), TARGET)
        )
        await service.delete_step(TEAM_ID, WORKFLOW_ID, STEP_2)
        step_repo.delete_step.assert_awaited_once_with(STEP_2)
        step_repo.set_step_orders.assert_not_awaited()
        step_repo.update_step.assert_not_awaited()

    async def test_reorder_assigns_dense_orders(self, repos) -> None:
        service, _, step_repo, _ = repos
        current = [
            make_step(STEP_1, 0, domains("a.com"), TARGET),
            make_step(STEP_2, 4, domains("b.com"), TARGET),
            make_step(STEP_3, 9, domains("c.com"), TARGET),
        ]
        step_repo.list_steps = AsyncMock(return_value=current)

        await service.reorder_steps(TEAM_ID, WORKFLOW_ID, [STEP_3, STEP_1, STEP_2])

        step_repo.set_step_orders.assert_awaited_once_with({STEP_3: 0, STEP_1: 1, STEP_2: 2})

    @pytest.mark.parametrize(
        "step_ids",
        [
            [STEP_1, STEP_2],
            [STEP_1, STEP_2, STEP_3, "cstep4000000000000000001"],
            [STEP_1, STEP_1, STEP_2],
            [],
        ],
    )
    async def test_reorder_requires_permutation(self, repos, step_ids) -> None:
        service, _, step_repo, _ = repos
        step_repo.list_steps = AsyncMock(
            return_value=[
                make_step(STEP_1, 0, domains("a.com"), TARGET),
                make_step(STEP_2, 1, domains("b.com"), TARGET),
                make_step(STEP_3, 2, domains("c.com"), TARGET),
            ]
        )
        with pytest.raises(ValidationException) as exc_info:
            await service.reorder_steps(TEAM_ID, WORKFLOW_ID, step_ids)
        assert exc_info.value.details == {"field": "step_ids"}
        step_repo.set_step_orders.assert_not_awaited()

    async def test_reorder_rejects_malformed_ids_before_repository_calls(self, repos) -> None:
        service, workflow_repo, step_repo, _ = repos
        with pytest.raises(ValidationException):
            await service.reorder_steps(TEAM_ID, WORKFLOW_ID, [STEP_1, "1; DROP"])
        workflow_repo.get_by_id_and_team.assert_not_awaited()
        step_repo.list_steps.assert_not_awaited()

    async def test_list_steps_sorted(self, repos) -> None:
        service, _, step_repo, _ = repos
        step_repo.list_steps = AsyncMock(
            return_value=[
                make_step(STEP_2, 3, domains("b.com"), TARGET),
                make_step(STEP_1, 1, domains("a.com"), TARGET),
            ]
        )
        steps = await service.list_steps(TEAM_ID, WORKFLOW_ID)
        assert [s.id for s in steps] == [STEP_1, STEP_2]
