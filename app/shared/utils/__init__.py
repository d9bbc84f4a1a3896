"""Shared utilities: datetime, generators."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import (
    generate_cuid,
    generate_deleted_suffix,
    generate_otp,
    retired_slug,
)

__all__ = [
    "ensure_utc",
    "generate_cuid",
    "generate_deleted_suffix",
    "generate_otp",
    "retired_slug",
    "utc_now",
]
