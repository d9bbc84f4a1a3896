"""Team, User and UserTeam ORM models (collaborator tables the router reads)."""

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Team(CuidMixin, TimestampMixin, Base):
    """Team (owning tenant). Table: team."""

    __tablename__ = "team"

    name: Mapped[str] = mapped_column(String, nullable=False)
    plan: Mapped[str] = mapped_column(
        String, nullable=False, default="free", server_default=sa.text("'free'")
    )


class User(CuidMixin, TimestampMixin, Base):
    """User account. Table: user."""

    __tablename__ = "user"

    email: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)


class UserTeam(Base):
    """Team membership. Table: user_team."""

    __tablename__ = "user_team"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("user.id", ondelete="CASCADE"), primary_key=True
    )
    team_id: Mapped[str] = mapped_column(
        String, ForeignKey("team.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    role: Mapped[str] = mapped_column(
        String, nullable=False, default="MEMBER", server_default=sa.text("'MEMBER'")
    )

    __table_args__ = (UniqueConstraint("user_id", "team_id", name="uq_user_team"),)
