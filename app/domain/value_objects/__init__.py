"""Domain value objects and shared value types."""

from app.domain.value_objects.core import (
    EntityId,
    VisitorIdentity,
    ensure_valid_id,
    is_valid_id,
    normalize_domain,
    normalize_email,
    normalize_slug,
)

__all__ = [
    "EntityId",
    "VisitorIdentity",
    "ensure_valid_id",
    "is_valid_id",
    "normalize_domain",
    "normalize_email",
    "normalize_slug",
]
