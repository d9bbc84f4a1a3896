"""Domain value objects for the Linkroom workflow router.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass

from app.domain.exceptions import ValidationException

# CUID / CUID2 shape: lowercase letter then lowercase alphanumerics.
ID_MIN_LENGTH = 8
ID_MAX_LENGTH = 32
_ID_RE = re.compile(
    r"^[a-z][a-z0-9]{" + str(ID_MIN_LENGTH - 1) + "," + str(ID_MAX_LENGTH - 1) + r"}$"
)

# RFC 1035-ish hostname: dot-separated labels, no leading/trailing hyphen.
_DOMAIN_RE = re.compile(
    r"^(?=.{1,253}$)([a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?)(\.[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?)*$"
)


def is_valid_id(value: object) -> bool:
    """Return True if value is a CUID-shaped identifier safe to use in lookups."""
    return isinstance(value, str) and bool(_ID_RE.fullmatch(value))


@dataclass(frozen=True)
class EntityId:
    """Value object for an identifier received across a trust boundary.

    Workflow, team, step and link ids are CUIDs. Anything else is rejected
    before it reaches a repository.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Identifier must be a non-empty string")
        if not is_valid_id(self.value):
            raise ValueError("Identifier has an invalid format")


def ensure_valid_id(value: str | None, field: str) -> str:
    """Return value when it is a well-formed id, else raise ValidationException.

    Args:
        value: Raw identifier (path param, header, JSON field).
        field: Name reported in the error details (e.g. 'workflow_id').

    Raises:
        ValidationException: If value is missing or not CUID-shaped.
    """
    try:
        return EntityId(value or "").value
    except ValueError as e:
        raise ValidationException(f"Invalid {field} format", field=field) from e


def normalize_domain(value: str) -> str:
    """Return a lower-cased domain with any presentation '@' prefix removed.

    Raises:
        ValueError: If the result is not a hostname.
    """
    domain = value.strip().lower().lstrip("@")
    if not domain or not _DOMAIN_RE.match(domain):
        raise ValueError(f"Invalid domain: {value!r}")
    return domain


def normalize_email(value: str) -> str:
    """Return a trimmed, lower-cased e-mail address.

    Raises:
        ValueError: If there is not exactly one '@' with text on both sides,
            or the part after '@' is not a hostname.
    """
    email = value.strip().lower()
    local, sep, domain = email.partition("@")
    if not sep or not local or "@" in domain or " " in email:
        raise ValueError(f"Invalid email: {value!r}")
    normalize_domain(domain)
    return email


@dataclass(frozen=True)
class VisitorIdentity:
    """Identifying attributes of a visitor opening a workflow entry link.

    email is lower-cased and trimmed; domain is derived from the text after
    the last '@'. Both are None for anonymous visitors.
    """

    email: str | None = None

    def __post_init__(self) -> None:
        if self.email is not None:
            cleaned = self.email.strip().lower()
            object.__setattr__(self, "email", cleaned or None)

    @classmethod
    def from_email(cls, email: str | None) -> "VisitorIdentity":
        return cls(email=email)

    @property
    def domain(self) -> str | None:
        if not self.email or "@" not in self.email:
            return None
        domain = self.email.rsplit("@", 1)[1]
        return domain or None

    @property
    def is_anonymous(self) -> bool:
        return self.email is None


_SLUG_RE = re.compile(r"^[a-zA-Z0-9]+(?:[-_][a-zA-Z0-9]+)*$")


def normalize_slug(value: str) -> str:
    """Return a trimmed URL path slug.

    Raises:
        ValueError: If value is empty, longer than 100 characters, or holds
            anything but letters, digits and single '-' / '_' separators.
    """
    slug = value.strip()
    if not slug or len(slug) > 100 or not _SLUG_RE.match(slug):
        raise ValueError(f"Invalid slug: {value!r}")
    return slug
