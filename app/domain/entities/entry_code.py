"""One-time verification code mailed to a visitor of a workflow entry link."""

import hashlib
from dataclasses import dataclass
from datetime import datetime


def entry_code_identifier(entry_link_id: str, email: str) -> str:
    """Scope of a code: one entry link and one (normalised) visitor email."""
    return f"workflow-otp:{entry_link_id}:{email}"


def hash_entry_code(identifier: str, code: str) -> str:
    """Return the stored form of code; the plain code is never persisted."""
    return hashlib.sha256(f"{identifier}:{code.strip()}".encode()).hexdigest()


@dataclass(frozen=True)
class EntryCodeEntity:
    """Stored verification code. used_at marks redemption."""

    id: str
    identifier: str
    expires_at: datetime
    used_at: datetime | None = None

    @property
    def is_used(self) -> bool:
        return self.used_at is not None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
