"""Entry code delivery: log-only sender."""

from __future__ import annotations

import logging
from datetime import datetime

from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class LogOnlyEntryCodeNotifier:
    """IEntryCodeNotifier implementation that logs instead of sending email.

    Use when no mail transport is configured. Production overrides the
    get_entry_code_notifier dependency with a real sender.
    """

    async def send_code(
        self, email: str, code: str, *, team_id: str, expires_at: datetime
    ) -> None:
        """Log the delivery; the code itself only at DEBUG."""
        domain = email.rsplit("@", 1)[-1]
        logger.info(
            "Entry code: would email a visitor at %s for team %s (expires %s)",
            domain,
            team_id,
            expires_at.isoformat(),
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Entry code for %s: %s", email, code)
