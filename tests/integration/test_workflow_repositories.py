"""Workflow, step, link and entry code repository tests. Require Postgres; rolled back after each test."""

from datetime import timedelta

import pytest

from app.application.services.step_definition_parser import parse_allow_list
from app.domain.entities.entry_code import entry_code_identifier, hash_entry_code
from app.domain.entities.workflow import RouteAction
from app.domain.enums import LinkType
from app.infrastructure.persistence.models import Team, User, UserTeam, WorkflowStep
from app.infrastructure.persistence.repositories import (
    EntryCodeRepository,
    LinkRepository,
    TeamRepository,
    WorkflowRepository,
    WorkflowStepRepository,
)
from app.shared.utils.datetime import utc_now


async def _team(db_session, plan: str = "business") -> Team:
    team = Team(name="Repo Test Team", plan=plan)
    db_session.add(team)
    await db_session.flush()
    return team


async def _workflow(db_session, team: Team):
    links = LinkRepository(db_session)
    entry = await links.create_link(
        team.id,
        LinkType.WORKFLOW_LINK,
        "Repo test - Entry Link",
        email_protected=True,
        email_authenticated=True,
    )
    return await WorkflowRepository(db_session).create_workflow(
        team_id=team.id, name="Repo test", description=None, entry_link_id=entry.id
    )


@pytest.mark.requires_db
async def test_team_membership(db_session) -> None:
    team = await _team(db_session)
    user = User(email="member@repo-test.io")
    db_session.add(user)
    await db_session.flush()
    db_session.add(UserTeam(user_id=user.id, team_id=team.id))
    await db_session.flush()

    repo = TeamRepository(db_session)
    found = await repo.get_by_id(team.id)
    assert found is not None and found.plan == "business"
    assert await repo.is_member(team.id, user.id)
    assert not await repo.is_member(team.id, "cnobody0000000000000001")


@pytest.mark.requires_db
async def test_workflow_found_by_entry_link_and_team(db_session) -> None:
    team = await _team(db_session)
    workflow = await _workflow(db_session, team)
    repo = WorkflowRepository(db_session)

    assert (await repo.get_by_entry_link(workflow.entry_link_id)).id == workflow.id
    assert (await repo.get_by_id_and_team(workflow.id, team.id)).id == workflow.id
    assert await repo.get_by_id_and_team(workflow.id, "cotherteam00000000000001") is None
    assert workflow.is_active is True


@pytest.mark.requires_db
async def test_steps_listed_in_order_and_renumbered(db_session) -> None:
    team = await _team(db_session)
    workflow = await _workflow(db_session, team)
    target = await LinkRepository(db_session).create_link(
        team.id, LinkType.DOCUMENT_LINK, "Deck"
    )
    steps = WorkflowStepRepository(db_session)
    conditions = parse_allow_list(["@acme.com"])
    action = RouteAction(target_link_id=target.id)
    late = await steps.create_step(workflow.id, "late", 5, conditions, action)
    early = await steps.create_step(workflow.id, "early", 1, conditions, action)

    assert [s.id for s in await steps.list_steps(workflow.id)] == [early.id, late.id]
    assert await steps.max_step_order(workflow.id) == 5
    assert await steps.count_by_workflow(workflow.id) == 2

    await steps.set_step_orders({late.id: 0, early.id: 1})
    db_session.expire_all()
    listed = await steps.list_steps(workflow.id)
    assert [(s.id, s.step_order) for s in listed] == [(late.id, 0), (early.id, 1)]
    assert listed[0].conditions == conditions
    assert listed[0].action == action


@pytest.mark.requires_db
async def test_malformed_stored_step_parsed_leniently(db_session) -> None:
    team = await _team(db_session)
    workflow = await _workflow(db_session, team)
    db_session.add(
        WorkflowStep(
            workflow_id=workflow.id,
            name="legacy",
            step_order=0,
            conditions={"logic": "XOR", "items": []},
            actions=[{"type": "route", "targetLinkId": "not a cuid"}],
        )
    )
    await db_session.flush()

    [step] = await WorkflowStepRepository(db_session).list_steps(workflow.id)
    assert step.conditions.is_empty
    assert step.action is None


@pytest.mark.requires_db
async def test_retired_link_frees_slug(db_session) -> None:
    team = await _team(db_session)
    links = LinkRepository(db_session)
    link = await links.create_link(
        team.id, LinkType.WORKFLOW_LINK, "Entry", domain_slug="docs.repo-test.io", slug="deck"
    )
    assert await links.slug_in_use("docs.repo-test.io", "deck")

    await links.retire_link(link.id, "deck-DELETED-abc123")

    assert not await links.slug_in_use("docs.repo-test.io", "deck")
    retired = await links.get_by_id(link.id)
    assert retired is not None and not retired.is_available
    assert await links.resolve_link(link.id, team.id) is None


@pytest.mark.requires_db
async def test_update_workflow_clears_description(db_session) -> None:
    team = await _team(db_session)
    workflow = await _workflow(db_session, team)
    repo = WorkflowRepository(db_session)

    described = await repo.update_workflow(workflow.id, description="Q3 investors")
    assert described.description == "Q3 investors"
    unchanged = await repo.update_workflow(workflow.id, name="Renamed")
    assert unchanged.description == "Q3 investors"
    cleared = await repo.update_workflow(workflow.id, description="  ")
    assert cleared.description is None


@pytest.mark.requires_db
async def test_entry_code_replace_find_and_redeem(db_session) -> None:
    repo = EntryCodeRepository(db_session)
    identifier = entry_code_identifier("clentryrepo0000000000001", "jane@repo-test.io")
    expires_at = utc_now() + timedelta(minutes=10)

    first = await repo.replace(identifier, hash_entry_code(identifier, "111111"), expires_at)
    second = await repo.replace(identifier, hash_entry_code(identifier, "222222"), expires_at)

    assert await repo.find(identifier, hash_entry_code(identifier, "111111")) is None
    found = await repo.find(identifier, hash_entry_code(identifier, "222222"))
    assert found is not None and found.id == second.id != first.id
    assert not found.is_used and not found.is_expired(utc_now())

    await repo.mark_used(found.id, utc_now())
    redeemed = await repo.find(identifier, hash_entry_code(identifier, "222222"))
    assert redeemed is not None and redeemed.is_used
