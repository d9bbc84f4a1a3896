"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. Limit strings come from settings and are
read per request, so tests and deployments can change them via env.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import get_settings

limiter = Limiter(key_func=get_remote_address)


def _write_limit() -> str:
    return get_settings().write_rate_limit


def _entry_access_limit() -> str:
    return get_settings().entry_access_rate_limit


limit_writes = limiter.limit(_write_limit)
# Public entry-link access form (unauthenticated, one DB write per call).
limit_entry_access = limiter.limit(_entry_access_limit)
