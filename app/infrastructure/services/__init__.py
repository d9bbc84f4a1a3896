"""Infrastructure service adapters."""

from app.infrastructure.services.entry_code_notifier import LogOnlyEntryCodeNotifier

__all__ = ["LogOnlyEntryCodeNotifier"]
