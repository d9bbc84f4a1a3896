"""Verification codes mailed to workflow entry-link visitors."""

from datetime import datetime

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin


class WorkflowEntryCode(CuidMixin, Base):
    """One-time code for an entry link and visitor email. Table: workflow_entry_code.

    Stored by code_hash only; used_at marks redemption.
    """

    __tablename__ = "workflow_entry_code"

    identifier: Mapped[str] = mapped_column(String, nullable=False, index=True)
    code_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index(
            "ix_workflow_entry_code_identifier_hash",
            "identifier",
            "code_hash",
            unique=True,
        ),
    )
