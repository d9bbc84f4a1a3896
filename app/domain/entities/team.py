"""Team domain entity (owning tenant of workflows and links)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TeamEntity:
    """Team with the billing plan fact the workflow feature consumes."""

    id: str
    name: str
    plan: str

    def has_plan_in(self, plans: frozenset[str]) -> bool:
        return self.plan.strip().lower() in plans
