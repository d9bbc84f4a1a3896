"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime

    from app.application.dtos.workflow import RoutingDecision
    from app.domain.entities.workflow import WorkflowEntity
    from app.domain.value_objects.core import VisitorIdentity


# Workflow router interface
class IWorkflowRouter(Protocol):
    """Protocol for choosing a routing target for a visitor."""

    async def route(self, workflow_id: str, visitor: VisitorIdentity) -> RoutingDecision:
        """Load workflow by id and return the routing decision for visitor."""

    async def decide(
        self, workflow: WorkflowEntity, visitor: VisitorIdentity
    ) -> RoutingDecision:
        """Return the routing decision for an already loaded workflow."""


# Entry code notifier interface (visitor email verification)
class IEntryCodeNotifier(Protocol):
    """Protocol for delivering a verification code to an entry-link visitor."""

    async def send_code(
        self, email: str, code: str, *, team_id: str, expires_at: datetime
    ) -> None:
        """Deliver code to email. Must not raise for delivery problems it can retry."""
