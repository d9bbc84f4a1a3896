"""WorkflowService unit tests with mocked repos."""

import re
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.workflow import WorkflowCreate, WorkflowUpdate
from app.application.use_cases.workflows import WorkflowService
from app.domain.entities.link import CustomDomainEntity
from app.domain.enums import LinkType
from app.domain.exceptions import (
    PlanUpgradeRequiredException,
    ResourceNotFoundException,
    ValidationException,
)
from app.shared.utils.generators import DELETED_SLUG_MARKER
from tests.factories import (
    ENTRY_LINK_ID,
    TEAM_ID,
    WORKFLOW_ID,
    domains,
    make_entry_link,
    make_step,
    make_team,
    make_workflow,
)

DOMAIN_ID = "cdomain00000000000000001"


@pytest.fixture
def repos():
    workflow_repo = AsyncMock()
    workflow_repo.get_by_id_and_team = AsyncMock(return_value=make_workflow())

    async def create_workflow(team_id, name, description, entry_link_id):
        wf = make_workflow(team_id=team_id, entry_link_id=entry_link_id)
        wf.name = name
        wf.description = description
        return wf

    workflow_repo.create_workflow = AsyncMock(side_effect=create_workflow)
    step_repo = AsyncMock()
    step_repo.count_by_workflow = AsyncMock(return_value=0)
    link_repo = AsyncMock()

    async def create_link(team_id, link_type, name, **kwargs):
        return make_entry_link(
            domain_slug=kwargs.get("domain_slug"), slug=kwargs.get("slug")
        )

    link_repo.create_link = AsyncMock(side_effect=create_link)
    link_repo.get_by_id = AsyncMock(return_value=make_entry_link())
    link_repo.slug_in_use = AsyncMock(return_value=False)
    domain_repo = AsyncMock()
    domain_repo.get_by_slug_and_team = AsyncMock(
        return_value=CustomDomainEntity(id=DOMAIN_ID, team_id=TEAM_ID, slug="docs.acme.com")
    )
    team_repo = AsyncMock()
    team_repo.get_by_id = AsyncMock(return_value=make_team(plan="business"))
    execution_repo = AsyncMock()
    service = WorkflowService(
        workflow_repo,
        step_repo,
        link_repo,
        domain_repo,
        team_repo,
        execution_repo,
        excluded_plans=frozenset({"free", "pro"}),
        public_base_url="https://app.example.com/",
    )
    return service, workflow_repo, step_repo, link_repo, domain_repo, team_repo, execution_repo


class TestCreateWorkflow:
    async def test_creates_email_gated_entry_link_and_workflow(self, repos) -> None:
        service, workflow_repo, _, link_repo, _, _, _ = repos

        summary = await service.create_workflow(
            TEAM_ID, WorkflowCreate(name=" Investor routing ", description="  ")
        )

        link_repo.create_link.assert_awaited_once_with(
            TEAM_ID,
            LinkType.WORKFLOW_LINK,
            "Investor routing - Entry Link",
            domain_id=None,
            domain_slug=None,
            slug=None,
            email_protected=True,
            email_authenticated=True,
        )
        workflow_repo.create_workflow.assert_awaited_once_with(
            team_id=TEAM_ID,
            name="Investor routing",
            description=None,
            entry_link_id=ENTRY_LINK_ID,
        )
        assert summary.step_count == 0
        assert summary.entry_url == f"https://app.example.com/view/{ENTRY_LINK_ID}"

    async def test_custom_domain_entry_link(self, repos) -> None:
        service, _, _, link_repo, domain_repo, _, _ = repos

        summary = await service.create_workflow(
            TEAM_ID, WorkflowCreate(name="Deck", domain="Docs.Acme.com", slug="q3-deck")
        )

        domain_repo.get_by_slug_and_team.assert_awaited_once_with("docs.acme.com", TEAM_ID)
        link_repo.slug_in_use.assert_awaited_once_with("docs.acme.com", "q3-deck")
        kwargs = link_repo.create_link.call_args.kwargs
        assert kwargs["domain_id"] == DOMAIN_ID
        assert kwargs["domain_slug"] == "docs.acme.com"
        assert kwargs["slug"] == "q3-deck"
        assert summary.entry_url == "https://docs.acme.com/q3-deck"

    @pytest.mark.parametrize("plan", ["free", "pro", "Free "])
    async def test_excluded_plans_require_upgrade(self, repos, plan) -> None:
        service, workflow_repo, _, link_repo, _, team_repo, _ = repos
        team_repo.get_by_id = AsyncMock(return_value=make_team(plan=plan))
        with pytest.raises(PlanUpgradeRequiredException):
            await service.create_workflow(TEAM_ID, WorkflowCreate(name="x"))
        link_repo.create_link.assert_not_awaited()
        workflow_repo.create_workflow.assert_not_awaited()

    async def test_unknown_team_raises_not_found(self, repos) -> None:
        service, _, _, _, _, team_repo, _ = repos
        team_repo.get_by_id = AsyncMock(return_value=None)
        with pytest.raises(ResourceNotFoundException):
            await service.create_workflow(TEAM_ID, WorkflowCreate(name="x"))

    async def test_domain_and_slug_go_together(self, repos) -> None:
        service, _, _, _, _, team_repo, _ = repos
        with pytest.raises(ValidationException):
            await service.create_workflow(TEAM_ID, WorkflowCreate(name="x", domain="docs.acme.com"))
        with pytest.raises(ValidationException):
            await service.create_workflow(TEAM_ID, WorkflowCreate(name="x", slug="deck"))
        team_repo.get_by_id.assert_not_awaited()

    async def test_foreign_domain_rejected(self, repos) -> None:
        service, _, _, link_repo, domain_repo, _, _ = repos
        domain_repo.get_by_slug_and_team = AsyncMock(return_value=None)
        with pytest.raises(ValidationException) as exc_info:
            await service.create_workflow(
                TEAM_ID, WorkflowCreate(name="x", domain="docs.other.com", slug="deck")
            )
        assert exc_info.value.details == {"field": "domain"}
        link_repo.create_link.assert_not_awaited()

    async def test_slug_in_use_rejected(self, repos) -> None:
        service, _, _, link_repo, _, _, _ = repos
        link_repo.slug_in_use = AsyncMock(return_value=True)
        with pytest.raises(ValidationException) as exc_info:
            await service.create_workflow(
                TEAM_ID, WorkflowCreate(name="x", domain="docs.acme.com", slug="deck")
            )
        assert exc_info.value.details == {"field": "slug"}
        link_repo.create_link.assert_not_awaited()

    async def test_empty_name_rejected(self, repos) -> None:
        service, _, _, _, _, _, _ = repos
        with pytest.raises(ValidationException):
            await service.create_workflow(TEAM_ID, WorkflowCreate(name="   "))


class TestReadAndUpdate:
    async def test_get_workflow_includes_sorted_steps(self, repos) -> None:
        service, _, step_repo, _, _, _, _ = repos
        step_repo.list_steps = AsyncMock(
            return_value=[
                make_step("cstep2000000000000000001", 1, domains("b.com"), None),
                make_step("cstep1000000000000000001", 0, domains("a.com"), None),
            ]
        )
        summary = await service.get_workflow(TEAM_ID, WORKFLOW_ID)
        assert summary.step_count == 2
        assert [s.step_order for s in summary.steps] == [0, 1]

    async def test_get_workflow_of_other_team_not_found(self, repos) -> None:
        service, workflow_repo, _, _, _, _, _ = repos
        workflow_repo.get_by_id_and_team = AsyncMock(return_value=None)
        with pytest.raises(ResourceNotFoundException):
            await service.get_workflow(TEAM_ID, WORKFLOW_ID)

    async def test_set_active_updates_flag_only(self, repos) -> None:
        service, workflow_repo, _, _, _, _, _ = repos
        workflow_repo.update_workflow = AsyncMock(return_value=make_workflow(is_active=False))
        summary = await service.set_active(TEAM_ID, WORKFLOW_ID, False)
        workflow_repo.update_workflow.assert_awaited_once_with(
            WORKFLOW_ID, name=None, description=None, is_active=False
        )
        assert summary.workflow.is_active is False

    async def test_update_passes_empty_description_through(self, repos) -> None:
        service, workflow_repo, _, _, _, _, _ = repos
        workflow_repo.update_workflow = AsyncMock(return_value=make_workflow())
        await service.update_workflow(TEAM_ID, WORKFLOW_ID, WorkflowUpdate(description=""))
        workflow_repo.update_workflow.assert_awaited_once_with(
            WORKFLOW_ID, name=None, description="", is_active=None
        )

    async def test_update_rejects_blank_name(self, repos) -> None:
        service, workflow_repo, _, _, _, _, _ = repos
        with pytest.raises(ValidationException):
            await service.update_workflow(TEAM_ID, WORKFLOW_ID, WorkflowUpdate(name=" "))
        workflow_repo.update_workflow.assert_not_awaited()


class TestDeleteWorkflow:
    async def test_delete_retires_entry_link_slug(self, repos) -> None:
        service, workflow_repo, _, link_repo, _, _, _ = repos
        link_repo.get_by_id = AsyncMock(
            return_value=make_entry_link(domain_slug="docs.acme.com", slug="q3-deck")
        )

        await service.delete_workflow(TEAM_ID, WORKFLOW_ID)

        workflow_repo.delete_workflow.assert_awaited_once_with(WORKFLOW_ID)
        link_id, new_slug = link_repo.retire_link.call_args.args
        assert link_id == ENTRY_LINK_ID
        assert re.fullmatch(
            rf"q3-deck{DELETED_SLUG_MARKER}[A-Za-z0-9]{{6}}", new_slug
        )

    async def test_delete_without_slug_retires_link(self, repos) -> None:
        service, _, _, link_repo, _, _, _ = repos
        await service.delete_workflow(TEAM_ID, WORKFLOW_ID)
        link_repo.retire_link.assert_awaited_once_with(ENTRY_LINK_ID, None)

    async def test_delete_malformed_id_rejected(self, repos) -> None:
        service, workflow_repo, _, _, _, _, _ = repos
        with pytest.raises(ValidationException):
            await service.delete_workflow(TEAM_ID, "nope")
        workflow_repo.get_by_id_and_team.assert_not_awaited()
        workflow_repo.delete_workflow.assert_not_awaited()
