"""Link and Domain ORM models (collaborator tables the router reads and updates)."""

from typing import Any

import sqlalchemy as sa
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import LinkType
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import SoftDeleteMixin, TeamScopedModel


class Domain(TeamScopedModel, Base):
    """Custom domain registered by a team. Table: domain."""

    __tablename__ = "domain"

    slug: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)


class Link(TeamScopedModel, SoftDeleteMixin, Base):
    """Shareable link. Table: link.

    Only the columns the workflow router needs; document/dataroom content
    lives with the viewer.
    """

    __tablename__ = "link"

    link_type: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default=LinkType.DOCUMENT_LINK.value,
        index=True,
    )
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    document_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    dataroom_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    domain_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("domain.id", ondelete="SET NULL"), nullable=True
    )
    domain_slug: Mapped[str | None] = mapped_column(String, nullable=True)
    slug: Mapped[str | None] = mapped_column(String, nullable=True)
    email_protected: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    email_authenticated: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    allow_list: Mapped[list[Any]] = mapped_column(
        JSON, nullable=False, default=list, server_default=sa.text("'[]'")
    )
    is_archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )

    __table_args__ = (
        UniqueConstraint("domain_slug", "slug", name="uq_link_domain_slug_slug"),
        CheckConstraint(
            "link_type IN ({})".format(
                ", ".join("'{}'".format(v) for v in LinkType.values())
            ),
            name="link_type_check",
        ),
    )
