"""
Voice Agent Demo Builder - Demo Link Service
Mints, validates and tracks shareable demo links
"""
import re
import logging
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, List, Optional

from demo_builder.exceptions import SlugGenerationError
from demo_builder.models.client import Client
from demo_builder.models.demo_link import DemoLink, DEFAULT_MAX_DURATION_SECONDS
from demo_builder.utils import utcnow

logger = logging.getLogger(__name__)


SLUG_BASE_MAX_LENGTH = 30
SLUG_SUFFIX_LENGTH = 4
SLUG_ALPHABET = string.ascii_lowercase + string.digits
DEFAULT_SLUG_ATTEMPTS = 5


class LinkStatus(Enum):
    VALID = "valid"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    INACTIVE = "inactive"
    CLIENT_MISSING = "client_missing"


LINK_STATUS_MESSAGES = {
    LinkStatus.NOT_FOUND: "Demo link not found. It may have been deleted or the URL is incorrect.",
    LinkStatus.EXPIRED: "This demo link has expired. Please request a new link from your contact.",
    LinkStatus.INACTIVE: "This demo link is no longer active.",
    LinkStatus.CLIENT_MISSING: "The business associated with this demo could not be found.",
}


@dataclass
class SlugResolution:
    """Outcome of opening a demo link. `client` is only set when valid."""
    status: LinkStatus
    link: Optional[DemoLink] = None
    client: Optional[Client] = None

    @property
    def ok(self) -> bool:
        return self.status == LinkStatus.VALID

    @property
    def message(self) -> Optional[str]:
        return LINK_STATUS_MESSAGES.get(self.status)


def slug_base(business_name: str) -> str:
    """URL-friendly, truncated form of the business name"""
    slug = (business_name or '').lower()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return slug[:SLUG_BASE_MAX_LENGTH]


def generate_slug(business_name: str) -> str:
    suffix = ''.join(secrets.choice(SLUG_ALPHABET) for _ in range(SLUG_SUFFIX_LENGTH))
    return f"{slug_base(business_name)}-{suffix}"


def check_link(link: DemoLink, now: datetime = None) -> LinkStatus:
    """
    Why a link is (in)valid at `now`.

    An expired link reports EXPIRED even if it was also deactivated.
    """
    now = now or utcnow()
    if link.expires_at is not None and link.expires_at <= now:
        return LinkStatus.EXPIRED
    if not link.is_active:
        return LinkStatus.INACTIVE
    return LinkStatus.VALID


def is_valid(link: DemoLink, now: datetime = None) -> bool:
    """Active and not past its expiry. Never mutates the link."""
    return check_link(link, now) == LinkStatus.VALID


class DemoLinkService:
    """Demo link manager backed by the data service"""

    def __init__(
        self,
        data_service,
        clock: Callable[[], datetime] = utcnow,
        max_slug_attempts: int = DEFAULT_SLUG_ATTEMPTS
    ):
        self.data_service = data_service
        self.clock = clock
        self.max_slug_attempts = max_slug_attempts

    def _unique_slug(self, business_name: str) -> str:
        taken = self.data_service.get_all_slugs()
        for _ in range(self.max_slug_attempts):
            slug = generate_slug(business_name)
            if slug not in taken:
                return slug
            logger.warning(f"Slug collision on '{slug}', retrying")
        raise SlugGenerationError(
            f"Could not generate a unique slug for '{business_name}' "
            f"after {self.max_slug_attempts} attempts"
        )

    def create_link(
        self,
        client: Client,
        expires_in_days: Optional[int] = None,
        max_duration_seconds: int = DEFAULT_MAX_DURATION_SECONDS,
        demo_phone_number: str = None
    ) -> DemoLink:
        """
        Mint a link for a client.

        `expires_in_days=None` means the link never expires; otherwise the
        expiry is fixed now and never recomputed.
        """
        now = self.clock()
        link = DemoLink(
            id='',
            client_id=client.id,
            slug=self._unique_slug(client.business_name),
            created_at=now,
            expires_at=now + timedelta(days=expires_in_days) if expires_in_days is not None else None,
            max_duration_seconds=max_duration_seconds,
            demo_phone_number=demo_phone_number or None
        )
        self.data_service.save_demo_link(link)
        logger.info(f"Created demo link {link.slug} for client {client.id}")
        return link

    # ---------- lookup ----------

    def get_link(self, link_id: str) -> Optional[DemoLink]:
        return self.data_service.get_demo_link(link_id)

    def get_link_by_slug(self, slug: str) -> Optional[DemoLink]:
        return self.data_service.get_demo_link_by_slug(slug)

    def get_links_for_client(self, client_id: str, active_only: bool = False) -> List[DemoLink]:
        links = self.data_service.get_demo_links_by_client(client_id)
        if active_only:
            links = [link for link in links if link.is_active]
        return links

    def is_valid(self, link: DemoLink) -> bool:
        return is_valid(link, self.clock())

    def check_link(self, link: DemoLink) -> LinkStatus:
        return check_link(link, self.clock())

    def resolve_slug(self, slug: str, now: datetime = None) -> SlugResolution:
        """
        Open a demo link.

        Client data is only attached once the link passes the validity
        check. A successful resolution counts as one view.
        """
        link = self.get_link_by_slug(slug)
        if not link:
            return SlugResolution(status=LinkStatus.NOT_FOUND)

        status = check_link(link, now or self.clock())
        if status != LinkStatus.VALID:
            return SlugResolution(status=status, link=link)

        client = self.data_service.get_client(link.client_id)
        if not client:
            return SlugResolution(status=LinkStatus.CLIENT_MISSING, link=link)

        link = self.increment_usage(slug) or link
        return SlugResolution(status=LinkStatus.VALID, link=link, client=client)

    # ---------- mutation ----------

    def increment_usage(self, slug: str) -> Optional[DemoLink]:
        """
        Count one view. Fire-and-forget: failures are logged, never raised.
        """
        try:
            link = self.get_link_by_slug(slug)
            if not link:
                logger.warning(f"Usage increment for unknown demo link '{slug}'")
                return None
            link.usage_count += 1
            self.data_service.save_demo_link(link)
            return link
        except Exception as e:
            logger.warning(f"Failed to record usage for demo link '{slug}': {e}")
            return None

    def deactivate_link(self, link_id: str) -> Optional[DemoLink]:
        link = self.get_link(link_id)
        if not link:
            return None
        link.is_active = False
        self.data_service.save_demo_link(link)
        logger.info(f"Deactivated demo link {link.slug}")
        return link

    def delete_link(self, link_id: str) -> bool:
        deleted = self.data_service.delete_demo_link(link_id)
        if deleted:
            logger.info(f"Deleted demo link {link_id}")
        return deleted

    def delete_links_for_client(self, client_id: str) -> int:
        links = self.data_service.get_demo_links_by_client(client_id)
        for link in links:
            self.data_service.delete_demo_link(link.id)
        return len(links)
