"""ID and value generators (CUID primary keys, retired-slug suffixes, one-time codes)."""

import secrets
import string

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

_SUFFIX_ALPHABET = string.ascii_letters + string.digits
DELETED_SLUG_MARKER = "-DELETED-"


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_deleted_suffix(length: int = 6) -> str:
    """Random alphanumeric suffix appended to the slug of a retired link."""
    return "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(length))


def generate_otp(length: int = 6) -> str:
    """Numeric one-time code (leading zeros kept)."""
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


def retired_slug(slug: str | None) -> str | None:
    """Return '{slug}-DELETED-{suffix}' so the original slug can be reused."""
    if not slug:
        return None
    return f"{slug}{DELETED_SLUG_MARKER}{generate_deleted_suffix()}"
