"""SQLAlchemy mixins for common model patterns (DRY).

Provides: CuidMixin, TeamMixin, TimestampMixin, SoftDeleteMixin and the
combined TeamScopedModel.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from app.shared.utils.generators import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TeamMixin:
    """Mixin for team-owned models. Provides team_id FK to team with CASCADE delete."""

    @declared_attr
    def team_id(cls) -> Mapped[str]:
        return mapped_column(
            String,
            ForeignKey("team.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class SoftDeleteMixin:
    """Mixin for soft delete (deleted_at). Null means not deleted."""

    @declared_attr
    def deleted_at(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime(timezone=True), nullable=True, index=True)


class TeamScopedModel(CuidMixin, TeamMixin, TimestampMixin):
    """Combined mixin: CUID + team_id + created_at/updated_at."""

    __abstract__ = True
