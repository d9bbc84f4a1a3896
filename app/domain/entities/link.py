"""Link and custom-domain entities (read models of the link collaborator)."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import LinkType


@dataclass(frozen=True)
class LinkEntity:
    """Shareable link: a workflow entry link or a routable content link."""

    id: str
    team_id: str
    link_type: LinkType
    name: str | None = None
    document_id: str | None = None
    dataroom_id: str | None = None
    domain_slug: str | None = None
    slug: str | None = None
    allow_list: tuple[str, ...] = ()
    is_archived: bool = False
    deleted_at: datetime | None = None

    @property
    def is_available(self) -> bool:
        """Return False for archived or deleted links."""
        return not self.is_archived and self.deleted_at is None

    @property
    def is_routable(self) -> bool:
        """Return whether a routing step may point at this link."""
        return self.link_type in LinkType.routable()

    def belongs_to_team(self, team_id: str) -> bool:
        return self.team_id == team_id

    def public_url(self, base_url: str) -> str:
        """Return the visitor-facing URL (custom domain when configured)."""
        if self.domain_slug and self.slug:
            return f"https://{self.domain_slug}/{self.slug}"
        return f"{base_url.rstrip('/')}/view/{self.id}"


@dataclass(frozen=True)
class CustomDomainEntity:
    """Custom domain registered by a team (e.g. docs.acme.com)."""

    id: str
    team_id: str
    slug: str
