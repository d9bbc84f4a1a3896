"""Link and custom-domain repositories. Return domain entities."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities.link import CustomDomainEntity, LinkEntity
from app.domain.enums import LinkType
from app.infrastructure.persistence.models.link import Domain, Link
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc, utc_now


def _link_to_entity(link: Link) -> LinkEntity:
    """Map ORM Link to LinkEntity."""
    return LinkEntity(
        id=link.id,
        team_id=link.team_id,
        link_type=LinkType(link.link_type),
        name=link.name,
        document_id=link.document_id,
        dataroom_id=link.dataroom_id,
        domain_slug=link.domain_slug,
        slug=link.slug,
        allow_list=tuple(e for e in (link.allow_list or []) if isinstance(e, str)),
        is_archived=link.is_archived,
        deleted_at=ensure_utc(link.deleted_at),
    )


class LinkRepository(BaseRepository[Link]):
    """Link repository (implements ILinkRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Link)

    async def get_by_id(self, link_id: str) -> LinkEntity | None:
        orm = await super().get_by_id(link_id)
        return _link_to_entity(orm) if orm else None

    async def resolve_link(self, link_id: str, team_id: str) -> LinkEntity | None:
        result = await self.db.execute(
            select(Link).where(
                Link.id == link_id,
                Link.team_id == team_id,
                Link.is_archived.is_(False),
                Link.deleted_at.is_(None),
            )
        )
        orm = result.scalar_one_or_none()
        return _link_to_entity(orm) if orm else None

    async def get_by_domain_slug(self, domain_slug: str, slug: str) -> LinkEntity | None:
        result = await self.db.execute(
            select(Link).where(
                Link.domain_slug == domain_slug,
                Link.slug == slug,
                Link.deleted_at.is_(None),
            )
        )
        orm = result.scalar_one_or_none()
        return _link_to_entity(orm) if orm else None

    async def slug_in_use(self, domain_slug: str, slug: str) -> bool:
        result = await self.db.execute(
            select(Link.id).where(Link.domain_slug == domain_slug, Link.slug == slug)
        )
        return result.first() is not None

    async def create_link(
        self,
        team_id: str,
        link_type: LinkType,
        name: str,
        *,
        domain_id: str | None = None,
        domain_slug: str | None = None,
        slug: str | None = None,
        email_protected: bool = False,
        email_authenticated: bool = False,
    ) -> LinkEntity:
        link = Link(
            team_id=team_id,
            link_type=link_type.value,
            name=name,
            domain_id=domain_id,
            domain_slug=domain_slug,
            slug=slug,
            email_protected=email_protected,
            email_authenticated=email_authenticated,
            allow_list=[],
        )
        return _link_to_entity(await self.create(link))

    async def set_allow_list(self, link_id: str, allow_list: list[str]) -> None:
        orm = await super().get_by_id(link_id)
        if orm:
            orm.allow_list = list(allow_list)
            await self.db.flush()

    async def retire_link(self, link_id: str, new_slug: str | None) -> None:
        orm = await super().get_by_id(link_id)
        if not orm:
            return
        orm.is_archived = True
        orm.deleted_at = utc_now()
        if new_slug:
            orm.slug = new_slug
        await self.db.flush()


class DomainRepository(BaseRepository[Domain]):
    """Custom domain repository (implements IDomainRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Domain)

    async def get_by_slug_and_team(
        self, slug: str, team_id: str
    ) -> CustomDomainEntity | None:
        result = await self.db.execute(
            select(Domain).where(Domain.slug == slug, Domain.team_id == team_id)
        )
        orm = result.scalar_one_or_none()
        return CustomDomainEntity(id=orm.id, team_id=orm.team_id, slug=orm.slug) if orm else None
