"""Public entry-link verification and access form."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from app.api.v1.dependencies import get_entry_resolver
from app.application.dtos.workflow import EntryCodeIssued, EntryResolution, RoutingDecision
from app.domain.enums import LinkType
from app.domain.exceptions import InvalidVerificationCodeException, ResourceNotFoundException
from app.main import app
from tests.factories import (
    ENTRY_LINK_ID,
    WORKFLOW_ID,
    domains,
    make_entry_link,
    make_link,
    make_step,
)

TARGET = "clinka000000000000000001"
EXPIRES_AT = datetime(2026, 10, 18, 12, 10, tzinfo=timezone.utc)


@pytest.fixture
def resolver():
    resolver = AsyncMock()
    app.dependency_overrides[get_entry_resolver] = lambda: resolver
    return resolver


async def test_verify_sends_code(client: AsyncClient, resolver) -> None:
    resolver.request_code = AsyncMock(
        return_value=EntryCodeIssued(
            entry_link_id=ENTRY_LINK_ID, email="jane@acme.com", expires_at=EXPIRES_AT
        )
    )

    response = await client.post(
        f"/api/v1/workflow-entry/links/{ENTRY_LINK_ID}/verify",
        json={"email": "jane@acme.com"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Verification code sent to your email"
    assert datetime.fromisoformat(data["expires_at"].replace("Z", "+00:00")) == EXPIRES_AT
    assert "code" not in data
    resolver.request_code.assert_awaited_once_with(ENTRY_LINK_ID, "jane@acme.com")


async def test_verify_requires_email(client: AsyncClient, resolver) -> None:
    response = await client.post(f"/api/v1/workflow-entry/links/{ENTRY_LINK_ID}/verify", json={})
    assert response.status_code == 422
    resolver.request_code.assert_not_awaited()


async def test_domain_verify(client: AsyncClient, resolver) -> None:
    resolver.request_code_by_domain = AsyncMock(
        return_value=EntryCodeIssued(
            entry_link_id=ENTRY_LINK_ID, email="x@y.com", expires_at=EXPIRES_AT
        )
    )
    response = await client.post(
        "/api/v1/workflow-entry/domains/docs.acme.com/q3/verify", json={"email": "x@y.com"}
    )
    assert response.status_code == 200
    resolver.request_code_by_domain.assert_awaited_once_with("docs.acme.com", "q3", "x@y.com")


async def test_access_routes_visitor(client: AsyncClient, resolver) -> None:
    target = make_link(TARGET, link_type=LinkType.DATAROOM_LINK)
    resolver.resolve = AsyncMock(
        return_value=EntryResolution(
            workflow_id=WORKFLOW_ID,
            entry_link=make_entry_link(),
            decision=RoutingDecision.match(
                make_step("cstep1000000000000000001", 0, domains("acme.com"), TARGET), target
            ),
            link=target,
            url=f"http://localhost:3000/view/{TARGET}",
        )
    )

    response = await client.post(
        f"/api/v1/workflow-entry/links/{ENTRY_LINK_ID}/access",
        json={"email": "jane@acme.com", "code": "123456"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["matched"] is True
    assert data["link_id"] == TARGET
    assert data["link_type"] == "DATAROOM_LINK"
    assert data["dataroom_id"] == target.dataroom_id
    resolver.resolve.assert_awaited_once_with(ENTRY_LINK_ID, "jane@acme.com", "123456")


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"email": "jane@acme.com"},
        {"code": "123456"},
        {"email": "jane@acme.com", "code": ""},
        {"email": "not an email", "code": "123456"},
    ],
)
async def test_access_without_email_and_code_returns_422(
    client: AsyncClient, resolver, body
) -> None:
    response = await client.post(
        f"/api/v1/workflow-entry/links/{ENTRY_LINK_ID}/access", json=body
    )
    assert response.status_code == 422
    resolver.resolve.assert_not_awaited()


async def test_bad_code_returns_401_with_reset(client: AsyncClient, resolver) -> None:
    resolver.resolve = AsyncMock(
        side_effect=InvalidVerificationCodeException("Verification code expired")
    )
    response = await client.post(
        f"/api/v1/workflow-entry/links/{ENTRY_LINK_ID}/access",
        json={"email": "jane@acme.com", "code": "123456"},
    )
    assert response.status_code == 401
    body = response.json()
    assert body["message"] == "Verification code expired"
    assert body["details"]["reset_verification"] is True


async def test_unknown_entry_link_returns_404(client: AsyncClient, resolver) -> None:
    resolver.resolve = AsyncMock(side_effect=ResourceNotFoundException("link", ENTRY_LINK_ID))
    response = await client.post(
        f"/api/v1/workflow-entry/links/{ENTRY_LINK_ID}/access",
        json={"email": "jane@acme.com", "code": "123456"},
    )
    assert response.status_code == 404


async def test_domain_access(client: AsyncClient, resolver) -> None:
    entry = make_entry_link(domain_slug="docs.acme.com", slug="q3")
    resolver.resolve_by_domain = AsyncMock(
        return_value=EntryResolution(
            workflow_id=WORKFLOW_ID,
            entry_link=entry,
            decision=RoutingDecision.no_match(),
            link=entry,
            url="https://docs.acme.com/q3",
        )
    )
    response = await client.post(
        "/api/v1/workflow-entry/domains/docs.acme.com/q3/access",
        json={"email": "x@y.com", "code": "654321"},
    )
    assert response.status_code == 200
    assert response.json()["url"] == "https://docs.acme.com/q3"
    resolver.resolve_by_domain.assert_awaited_once_with(
        "docs.acme.com", "q3", "x@y.com", "654321"
    )
