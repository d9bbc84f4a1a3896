"""Domain enumerations for the Linkroom workflow router.

Enums represent fixed sets of domain values (condition types, link types,
execution status). All are str Enums so they serialize as plain strings
in JSON columns and API responses.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class ConditionLogic(_ValuesMixin, str, Enum):
    """How the items of a step's condition set are combined."""

    AND = "AND"
    OR = "OR"


class ConditionType(_ValuesMixin, str, Enum):
    """Visitor attribute a condition inspects."""

    EMAIL = "email"
    DOMAIN = "domain"


class ConditionOperator(_ValuesMixin, str, Enum):
    """Supported comparison operators (membership only)."""

    IN_LIST = "in_list"


class ActionType(_ValuesMixin, str, Enum):
    """Step action types. Routing is the only action a step carries."""

    ROUTE = "route"


class LinkType(_ValuesMixin, str, Enum):
    """Kind of shareable link.

    WORKFLOW_LINK is the public entry link of a workflow; the other two are
    the content links a workflow can route visitors to.
    """

    DOCUMENT_LINK = "DOCUMENT_LINK"
    DATAROOM_LINK = "DATAROOM_LINK"
    WORKFLOW_LINK = "WORKFLOW_LINK"

    @classmethod
    def routable(cls) -> frozenset["LinkType"]:
        """Link types a routing step may target."""
        return frozenset({cls.DOCUMENT_LINK, cls.DATAROOM_LINK})


class WorkflowExecutionStatus(_ValuesMixin, str, Enum):
    """Outcome of one entry resolution."""

    COMPLETED = "completed"
    FAILED = "failed"
