"""Entry-link verification code store (Postgres). Codes are kept hashed."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities.entry_code import EntryCodeEntity
from app.infrastructure.persistence.models.entry_code import WorkflowEntryCode
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _code_to_entity(row: WorkflowEntryCode) -> EntryCodeEntity:
    return EntryCodeEntity(
        id=row.id,
        identifier=row.identifier,
        expires_at=ensure_utc(row.expires_at),
        used_at=ensure_utc(row.used_at),
    )


class EntryCodeRepository(BaseRepository[WorkflowEntryCode]):
    """Verification code repository (implements IEntryCodeRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowEntryCode)

    async def replace(
        self, identifier: str, code_hash: str, expires_at: datetime
    ) -> EntryCodeEntity:
        await self.db.execute(
            delete(WorkflowEntryCode).where(WorkflowEntryCode.identifier == identifier)
        )
        row = WorkflowEntryCode(
            identifier=identifier, code_hash=code_hash, expires_at=expires_at
        )
        return _code_to_entity(await self.create(row))

    async def find(self, identifier: str, code_hash: str) -> EntryCodeEntity | None:
        result = await self.db.execute(
            select(WorkflowEntryCode).where(
                WorkflowEntryCode.identifier == identifier,
                WorkflowEntryCode.code_hash == code_hash,
            )
        )
        row = result.scalar_one_or_none()
        return _code_to_entity(row) if row else None

    async def mark_used(self, code_id: str, used_at: datetime) -> None:
        row = await super().get_by_id(code_id)
        if row is None:
            return
        row.used_at = used_at
        await self.db.flush()
