"""Workflow service dependencies (composition root).

Read routes get services on a plain session (get_db); write routes and the
entry access form get them on a transactional session (get_db_transactional)
so a request's writes commit or roll back together.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.services import IEntryCodeNotifier
from app.application.services.workflow_router import WorkflowRouter
from app.application.use_cases.workflows import (
    EntryResolver,
    WorkflowService,
    WorkflowStepService,
)
from app.core.config import get_settings
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    DomainRepository,
    EntryCodeRepository,
    LinkRepository,
    TeamRepository,
    WorkflowExecutionRepository,
    WorkflowRepository,
    WorkflowStepRepository,
)
from app.infrastructure.services import LogOnlyEntryCodeNotifier


def _workflow_service(db: AsyncSession) -> WorkflowService:
    settings = get_settings()
    return WorkflowService(
        workflow_repo=WorkflowRepository(db),
        step_repo=WorkflowStepRepository(db),
        link_repo=LinkRepository(db),
        domain_repo=DomainRepository(db),
        team_repo=TeamRepository(db),
        execution_repo=WorkflowExecutionRepository(db),
        excluded_plans=settings.excluded_plans,
        public_base_url=settings.public_base_url,
    )


def _step_service(db: AsyncSession) -> WorkflowStepService:
    return WorkflowStepService(
        workflow_repo=WorkflowRepository(db),
        step_repo=WorkflowStepRepository(db),
        link_repo=LinkRepository(db),
    )


def _router(db: AsyncSession) -> WorkflowRouter:
    return WorkflowRouter(
        workflow_repo=WorkflowRepository(db),
        step_repo=WorkflowStepRepository(db),
        link_repo=LinkRepository(db),
    )


async def get_workflow_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WorkflowService:
    """Workflow service for read operations (list, get, executions)."""
    return _workflow_service(db)


async def get_workflow_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> WorkflowService:
    """Workflow service for create/update/delete (transactional)."""
    return _workflow_service(db)


async def get_step_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WorkflowStepService:
    """Step service for listing steps."""
    return _step_service(db)


async def get_step_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> WorkflowStepService:
    """Step service for create/update/delete/reorder (transactional)."""
    return _step_service(db)


async def get_workflow_router(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WorkflowRouter:
    """Router for operator dry runs (read only, no execution recorded)."""
    return _router(db)


def get_entry_code_notifier() -> IEntryCodeNotifier:
    """Delivery of entry-link verification codes (override to plug in a mailer)."""
    return LogOnlyEntryCodeNotifier()


async def get_entry_resolver(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    notifier: Annotated[IEntryCodeNotifier, Depends(get_entry_code_notifier)],
) -> EntryResolver:
    """Entry resolver for the public verify and access forms (writes codes and executions)."""
    settings = get_settings()
    return EntryResolver(
        workflow_repo=WorkflowRepository(db),
        link_repo=LinkRepository(db),
        router=_router(db),
        code_repo=EntryCodeRepository(db),
        notifier=notifier,
        execution_repo=WorkflowExecutionRepository(db),
        public_base_url=settings.public_base_url,
        code_ttl_minutes=settings.entry_code_ttl_minutes,
    )
