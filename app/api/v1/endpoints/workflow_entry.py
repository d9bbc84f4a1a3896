"""Public workflow entry links: verification and the visitor access form.

Unauthenticated. A visitor asks for a code (verify), which is mailed to the
address they give, then submits email and code (access) and gets back the
link to show next. Rate limited per client address.
"""

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import get_entry_resolver
from app.application.use_cases.workflows import EntryResolver
from app.core.limiter import limit_entry_access
from app.schemas.workflow_entry import (
    EntryAccessRequest,
    EntryAccessResponse,
    EntryVerifyRequest,
    EntryVerifyResponse,
)

router = APIRouter()


@router.post("/links/{entry_link_id}/verify", response_model=EntryVerifyResponse)
@limit_entry_access
async def verify_entry_link(
    request: Request,
    entry_link_id: str,
    body: EntryVerifyRequest,
    resolver: EntryResolver = Depends(get_entry_resolver),
):
    """Mail a verification code for /view/{entry_link_id}."""
    issued = await resolver.request_code(entry_link_id, str(body.email))
    return EntryVerifyResponse.from_issued(issued)


@router.post("/links/{entry_link_id}/access", response_model=EntryAccessResponse)
@limit_entry_access
async def access_entry_link(
    request: Request,
    entry_link_id: str,
    body: EntryAccessRequest,
    resolver: EntryResolver = Depends(get_entry_resolver),
):
    """Route a verified visitor arriving on /view/{entry_link_id}."""
    resolution = await resolver.resolve(entry_link_id, str(body.email), body.code)
    return EntryAccessResponse.from_resolution(resolution)


@router.post("/domains/{domain}/{slug}/verify", response_model=EntryVerifyResponse)
@limit_entry_access
async def verify_domain_entry_link(
    request: Request,
    domain: str,
    slug: str,
    body: EntryVerifyRequest,
    resolver: EntryResolver = Depends(get_entry_resolver),
):
    """Mail a verification code for https://{domain}/{slug}."""
    issued = await resolver.request_code_by_domain(domain, slug, str(body.email))
    return EntryVerifyResponse.from_issued(issued)


@router.post(
    "/domains/{domain}/{slug}/access", response_model=EntryAccessResponse
)
@limit_entry_access
async def access_domain_entry_link(
    request: Request,
    domain: str,
    slug: str,
    body: EntryAccessRequest,
    resolver: EntryResolver = Depends(get_entry_resolver),
):
    """Route a verified visitor arriving on https://{domain}/{slug}."""
    resolution = await resolver.resolve_by_domain(domain, slug, str(body.email), body.code)
    return EntryAccessResponse.from_resolution(resolution)
