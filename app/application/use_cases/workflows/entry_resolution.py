"""Entry resolution: turn a visit to a workflow entry link into the link to show.

A visitor first asks for a verification code (request_code), which is mailed
to the address they claim. The access form then sends email and code back
(resolve); the code is redeemed before any routing happens.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from app.application.dtos.workflow import (
    EntryCodeIssued,
    EntryResolution,
    WorkflowExecutionCreate,
)
from app.domain.entities.entry_code import entry_code_identifier, hash_entry_code
from app.domain.enums import LinkType, WorkflowExecutionStatus
from app.domain.exceptions import (
    InvalidVerificationCodeException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects.core import (
    VisitorIdentity,
    ensure_valid_id,
    normalize_domain,
    normalize_email,
)
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_otp

if TYPE_CHECKING:
    from app.application.dtos.workflow import RoutingDecision
    from app.application.interfaces.repositories import (
        IEntryCodeRepository,
        ILinkRepository,
        IWorkflowExecutionRepository,
        IWorkflowRepository,
    )
    from app.application.interfaces.services import IEntryCodeNotifier, IWorkflowRouter
    from app.domain.entities.link import LinkEntity
    from app.domain.entities.workflow import WorkflowEntity

logger = get_logger(__name__)

DEFAULT_CODE_TTL_MINUTES = 10


class EntryResolver:
    """Resolve a visitor arriving on a workflow entry link.

    A match returns the routed target link; an inactive workflow or no match
    returns the entry link itself, so routing failures stay invisible to the
    visitor. Every resolution is recorded as a workflow execution.
    """

    def __init__(
        self,
        workflow_repo: IWorkflowRepository,
        link_repo: ILinkRepository,
        router: IWorkflowRouter,
        code_repo: IEntryCodeRepository,
        notifier: IEntryCodeNotifier,
        execution_repo: IWorkflowExecutionRepository | None = None,
        *,
        public_base_url: str = "http://localhost:3000",
        code_ttl_minutes: int = DEFAULT_CODE_TTL_MINUTES,
    ) -> None:
        self._workflow_repo = workflow_repo
        self._link_repo = link_repo
        self._router = router
        self._code_repo = code_repo
        self._notifier = notifier
        self._execution_repo = execution_repo
        self._public_base_url = public_base_url
        self._code_ttl = timedelta(minutes=code_ttl_minutes)

    async def _entry_link(self, entry_link_id: str) -> LinkEntity:
        ensure_valid_id(entry_link_id, "entry_link_id")
        entry_link = await self._link_repo.get_by_id(entry_link_id)
        if entry_link is None or not entry_link.is_available:
            raise ResourceNotFoundException("link", entry_link_id)
        return entry_link

    async def _entry_link_by_domain(self, domain_slug: str, slug: str) -> LinkEntity:
        try:
            domain_slug = normalize_domain(domain_slug)
        except ValueError as e:
            raise ValidationException(str(e), field="domain") from e
        slug = (slug or "").strip()
        if not slug:
            raise ValidationException("Slug is required", field="slug")
        entry_link = await self._link_repo.get_by_domain_slug(domain_slug, slug)
        if entry_link is None or not entry_link.is_available:
            raise ResourceNotFoundException("link", f"{domain_slug}/{slug}")
        return entry_link

    async def _workflow_for(self, entry_link: LinkEntity) -> WorkflowEntity:
        if entry_link.link_type is not LinkType.WORKFLOW_LINK:
            raise ResourceNotFoundException("workflow", entry_link.id)
        workflow = await self._workflow_repo.get_by_entry_link(entry_link.id)
        if workflow is None:
            raise ResourceNotFoundException("workflow", entry_link.id)
        return workflow

    async def request_code(self, entry_link_id: str, email: str) -> EntryCodeIssued:
        """Mail a fresh verification code for entry_link_id to email.

        Earlier codes for the same link and email stop working.

        Raises:
            ValidationException: If entry_link_id or email is malformed.
            ResourceNotFoundException: If no workflow uses the link or the
                link is archived or deleted.
        """
        entry_link = await self._entry_link(entry_link_id)
        return await self._issue_code(entry_link, email)

    async def request_code_by_domain(
        self, domain_slug: str, slug: str, email: str
    ) -> EntryCodeIssued:
        """Mail a verification code for the entry link at https://{domain_slug}/{slug}."""
        entry_link = await self._entry_link_by_domain(domain_slug, slug)
        return await self._issue_code(entry_link, email)

    async def _issue_code(self, entry_link: LinkEntity, email: str) -> EntryCodeIssued:
        try:
            email = normalize_email(email or "")
        except ValueError as e:
            raise ValidationException("Invalid email address", field="email") from e
        workflow = await self._workflow_for(entry_link)

        identifier = entry_code_identifier(entry_link.id, email)
        code = generate_otp()
        expires_at = utc_now() + self._code_ttl
        await self._code_repo.replace(identifier, hash_entry_code(identifier, code), expires_at)
        await self._notifier.send_code(
            email, code, team_id=workflow.team_id, expires_at=expires_at
        )
        logger.info("Sent verification code for entry link %s", entry_link.id)
        return EntryCodeIssued(entry_link_id=entry_link.id, email=email, expires_at=expires_at)

    async def _redeem_code(
        self, entry_link: LinkEntity, visitor: VisitorIdentity, code: str
    ) -> None:
        if visitor.is_anonymous or not (code or "").strip():
            raise InvalidVerificationCodeException()
        identifier = entry_code_identifier(entry_link.id, visitor.email)
        record = await self._code_repo.find(identifier, hash_entry_code(identifier, code))
        if record is None or record.is_used:
            logger.info("Rejected verification code for entry link %s", entry_link.id)
            raise InvalidVerificationCodeException()
        now = utc_now()
        await self._code_repo.mark_used(record.id, now)
        if record.is_expired(now):
            raise InvalidVerificationCodeException("Verification code expired")

    async def resolve(self, entry_link_id: str, email: str, code: str) -> EntryResolution:
        """Resolve by entry link id once the visitor's code is redeemed.

        Raises:
            ValidationException: If entry_link_id is malformed.
            ResourceNotFoundException: If no workflow uses the link or the
                link is archived or deleted.
            InvalidVerificationCodeException: If code is wrong, used or expired.
        """
        entry_link = await self._entry_link(entry_link_id)
        return await self._resolve_link(entry_link, email, code)

    async def resolve_by_domain(
        self, domain_slug: str, slug: str, email: str, code: str
    ) -> EntryResolution:
        """Resolve by custom domain and slug (https://{domain_slug}/{slug})."""
        entry_link = await self._entry_link_by_domain(domain_slug, slug)
        return await self._resolve_link(entry_link, email, code)

    async def _resolve_link(
        self, entry_link: LinkEntity, email: str, code: str
    ) -> EntryResolution:
        workflow = await self._workflow_for(entry_link)
        try:
            visitor = VisitorIdentity.from_email(normalize_email(email or ""))
        except ValueError as e:
            # No code can have been issued for an address that does not parse.
            raise InvalidVerificationCodeException() from e
        await self._redeem_code(entry_link, visitor, code)

        started_at = utc_now()
        decision = await self._router.decide(workflow, visitor)
        execution_id = await self._record(workflow.id, visitor, decision, started_at)

        link = decision.target_link if decision.matched and decision.target_link else entry_link
        if decision.matched:
            logger.info(
                "Workflow %s routed visitor to link %s (step %s)",
                workflow.id,
                link.id,
                decision.step.id if decision.step else None,
            )
        return EntryResolution(
            workflow_id=workflow.id,
            entry_link=entry_link,
            decision=decision,
            link=link,
            url=link.public_url(self._public_base_url),
            execution_id=execution_id,
        )

    async def _record(
        self,
        workflow_id: str,
        visitor: VisitorIdentity,
        decision: RoutingDecision,
        started_at: datetime,
    ) -> str | None:
        if self._execution_repo is None:
            return None
        # A visitor who matched only broken steps was meant to be routed.
        failed = not decision.matched and bool(decision.warnings)
        execution = await self._execution_repo.record(
            WorkflowExecutionCreate(
                workflow_id=workflow_id,
                visitor_email=visitor.email,
                status=(
                    WorkflowExecutionStatus.FAILED.value
                    if failed
                    else WorkflowExecutionStatus.COMPLETED.value
                ),
                matched=decision.matched,
                target_link_id=decision.target_link_id,
                execution_log=[e.to_log_entry() for e in decision.evaluations],
                started_at=started_at,
                completed_at=utc_now(),
                error_message="; ".join(w.message for w in decision.warnings) or None,
            )
        )
        return execution.id
