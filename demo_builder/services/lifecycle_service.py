"""
Voice Agent Demo Builder - Lifecycle Service
Client status state machine and the artifact generation tied to it

    draft -> demo_ready -> approved -> production

Transitions only move forward. The module-level functions are pure: they
return an updated copy and never touch the caller's record, so a rejected
transition leaves it exactly as it was. LifecycleService wraps them with
loading and saving through an injected data service.
"""
import copy
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from demo_builder.exceptions import PreconditionError
from demo_builder.models.client import (
    Client,
    ClientStatus,
    ProductionDetails,
    WebsiteContext,
    create_client,
    normalize_services
)
from demo_builder.models.industry import get_industry_defaults
from demo_builder.services import artifact_generator
from demo_builder.utils import utcnow

logger = logging.getLogger(__name__)


PRODUCTION_READY_STATUSES = (ClientStatus.APPROVED, ClientStatus.PRODUCTION)
MAX_SERVICES_FROM_SCRAPE = 10

EDITABLE_FIELDS = (
    'business_name', 'industry', 'services', 'service_area', 'website_url',
    'hours', 'after_hours_goal', 'tone', 'transfer_rules', 'website_data',
)
REQUIRED_TEXT_FIELDS = ('business_name', 'industry', 'service_area')


# ==========================================
# Field edits
# ==========================================

def _check_shape(key: str, value):
    """Raise ValueError when an edited field has the wrong JSON shape"""
    if key in REQUIRED_TEXT_FIELDS:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{key} must be a non-empty string")
    elif key == 'services':
        if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
            raise ValueError("services must be a list of strings")
    elif key == 'hours':
        if not isinstance(value, dict):
            raise ValueError("hours must be an object")
    elif key == 'transfer_rules':
        if not isinstance(value, list) or not all(isinstance(r, dict) for r in value):
            raise ValueError("transfer_rules must be a list of objects")
    elif key == 'website_data':
        if value is not None and not isinstance(value, dict):
            raise ValueError("website_data must be an object")
    elif key == 'website_url':
        if value is not None and not isinstance(value, str):
            raise ValueError("website_url must be a string")


def apply_changes(client: Client, changes: Dict) -> Client:
    """
    Copy of `client` with the editable fields in `changes` applied.

    Unknown keys (including status) are ignored; `hours` is merged into the
    existing hours. Raises ValueError on a badly shaped field or an unknown
    tone or after-hours goal.
    """
    data = client.to_dict()
    for key in EDITABLE_FIELDS:
        if key not in changes:
            continue
        value = changes[key]
        _check_shape(key, value)
        if key == 'hours':
            data['hours'] = {**data['hours'], **value}
        elif key in REQUIRED_TEXT_FIELDS:
            data[key] = value.strip()
        else:
            data[key] = value

    return Client.from_dict(data)


# ==========================================
# Pure transitions
# ==========================================

def generate_demo_artifacts(client: Client, now: datetime = None) -> Client:
    """
    (Re)build the demo config, demo prompt and test instructions.

    Moves a draft to demo_ready. Records already approved or in production
    keep their status.
    """
    now = now or utcnow()
    updated = copy.deepcopy(client)
    updated.artifacts.demo_config = artifact_generator.generate_demo_config(updated, now)
    updated.artifacts.demo_system_prompt = artifact_generator.generate_demo_system_prompt(updated, now)
    updated.artifacts.client_test_instructions = artifact_generator.generate_client_test_instructions(updated, now)

    if updated.status == ClientStatus.DRAFT:
        updated.status = ClientStatus.DEMO_READY
    updated.updated_at = now
    return updated


def approve(client: Client, now: datetime = None) -> Client:
    """Mark a demo-ready client as approved and stamp approved_at"""
    if client.status != ClientStatus.DEMO_READY:
        raise PreconditionError(
            f"Client must be demo_ready to approve (status: {client.status.value})",
            status=client.status.value,
            operation='approve'
        )

    now = now or utcnow()
    updated = copy.deepcopy(client)
    updated.status = ClientStatus.APPROVED
    details = updated.production_details or ProductionDetails()
    details.approved_at = now
    updated.production_details = details
    updated.updated_at = now
    return updated


def generate_production_artifacts(client: Client, now: datetime = None) -> Client:
    """Build the production prompt for an approved or live client"""
    if client.status not in PRODUCTION_READY_STATUSES:
        raise PreconditionError(
            "Client must be approved before generating production artifacts",
            status=client.status.value,
            operation='generate_production_artifacts'
        )

    now = now or utcnow()
    updated = copy.deepcopy(client)
    updated.artifacts.production_system_prompt = artifact_generator.generate_production_system_prompt(updated, now)
    updated.updated_at = now
    return updated


def _require_approved(client: Client, operation: str, message: str):
    if client.status != ClientStatus.APPROVED:
        raise PreconditionError(message, status=client.status.value, operation=operation)


def promote_to_production(client: Client, now: datetime = None) -> Client:
    _require_approved(client, 'promote_to_production',
                      "Client must be approved before promoting to production")

    updated = generate_production_artifacts(client, now)
    updated.status = ClientStatus.PRODUCTION
    return updated


def publish_to_production(
    client: Client,
    voice_id: str,
    phone_number: Optional[str] = None,
    now: datetime = None
) -> Client:
    """
    Go live with a voice and optional phone number.

    The details are stored before the production prompt is rendered so the
    prompt carries them instead of placeholders.
    """
    _require_approved(client, 'publish',
                      "Client must be approved before publishing to production")

    staged = copy.deepcopy(client)
    details = staged.production_details or ProductionDetails()
    details.voice_id = voice_id
    details.phone_number = phone_number
    staged.production_details = details

    updated = generate_production_artifacts(staged, now)
    updated.status = ClientStatus.PRODUCTION
    return updated


def apply_scraped_data(client: Client, scraped: Optional[Dict], now: datetime = None) -> Client:
    """
    Merge the scraper's field bag into a client.

    Fills an empty business name or service area, appends scraped services
    that are not already listed (capped at 10 services) and stores the
    website context. Every key in the bag is optional.
    """
    scraped = scraped or {}
    updated = copy.deepcopy(client)

    if scraped.get('businessName') and not updated.business_name:
        updated.business_name = scraped['businessName'].strip()
    if scraped.get('serviceArea') and not updated.service_area:
        updated.service_area = scraped['serviceArea'].strip()

    merged = normalize_services(updated.services + list(scraped.get('services') or []))
    if len(merged) > len(updated.services):
        updated.services = merged[:max(MAX_SERVICES_FROM_SCRAPE, len(updated.services))]

    updated.website_data = WebsiteContext.from_scraped(scraped)
    updated.updated_at = now or utcnow()
    return updated


def build_quick_client(
    business_name: str,
    industry: str,
    service_area: str,
    website_url: str = None,
    website_data: WebsiteContext = None
) -> Client:
    """Draft client filled from the industry defaults ("Other" if unknown)"""
    defaults = get_industry_defaults(industry)
    return create_client(
        business_name=business_name,
        industry=industry,
        service_area=service_area,
        services=defaults['services'],
        tone=defaults['tone'],
        after_hours_goal=defaults['after_hours_goal'],
        hours=defaults['hours'],
        website_url=website_url,
        website_data=website_data
    )


# ==========================================
# Persistence-backed controller
# ==========================================

class LifecycleService:
    """
    Runs lifecycle operations against a record store.

    `data_service` needs get_client/save_client/delete_client/get_all_clients
    and, for cascading deletes, get_demo_links_by_client/delete_demo_link.
    Lookups of unknown ids return None instead of raising.
    """

    def __init__(self, data_service, clock: Callable[[], datetime] = utcnow):
        self.data_service = data_service
        self.clock = clock

    # ---------- creation & lookup ----------

    def create_client(self, business_name: str, industry: str, service_area: str, **profile) -> Client:
        now = self.clock()
        client = create_client(business_name, industry, service_area, **profile)
        client.created_at = now
        client.updated_at = now
        self.data_service.save_client(client)
        logger.info(f"Created client {client.id} ({client.business_name})")
        return client

    def create_client_from_dict(self, data: Dict) -> Client:
        """
        Create a draft from a request payload.

        The record is fully built and validated before it is stored, so a
        ValueError leaves nothing behind.
        """
        for key in REQUIRED_TEXT_FIELDS:
            _check_shape(key, data.get(key))

        now = self.clock()
        draft = create_client(data['business_name'].strip(), data['industry'], data['service_area'].strip())
        client = apply_changes(draft, data)
        client.created_at = now
        client.updated_at = now

        self.data_service.save_client(client)
        logger.info(f"Created client {client.id} ({client.business_name})")
        return client

    def quick_create(
        self,
        business_name: str,
        industry: str,
        service_area: str,
        website_url: str = None,
        scraped: Dict = None
    ) -> Client:
        """Create from industry defaults and go straight to demo_ready"""
        client = build_quick_client(business_name, industry, service_area, website_url=website_url)
        if scraped:
            client = apply_scraped_data(client, scraped, self.clock())
        client.created_at = self.clock()
        client = generate_demo_artifacts(client, self.clock())
        self.data_service.save_client(client)
        logger.info(f"Quick-created client {client.id} ({client.business_name}) for {industry}")
        return client

    def get_client(self, client_id: str) -> Optional[Client]:
        return self.data_service.get_client(client_id)

    def list_clients(self, status: ClientStatus = None) -> List[Client]:
        return self.data_service.get_all_clients(status=status)

    def update_client(self, client_id: str, changes: Dict, regenerate: bool = False) -> Optional[Client]:
        """
        Edit profile and behavior fields in any state.

        Status never changes here. With `regenerate`, demo artifacts are
        rebuilt after the edit (keeping approved/production status).
        """
        client = self.get_client(client_id)
        if not client:
            return None

        updated = apply_changes(client, changes)
        updated.updated_at = self.clock()
        if regenerate:
            updated = generate_demo_artifacts(updated, self.clock())

        self.data_service.save_client(updated)
        return updated

    def apply_website_data(self, client_id: str, scraped: Dict) -> Optional[Client]:
        client = self.get_client(client_id)
        if not client:
            return None
        updated = apply_scraped_data(client, scraped, self.clock())
        self.data_service.save_client(updated)
        return updated

    # ---------- transitions ----------

    def _transition(self, client_id: str, operation: str, transition, *args) -> Optional[Client]:
        client = self.get_client(client_id)
        if not client:
            return None

        try:
            updated = transition(client, *args, now=self.clock())
        except PreconditionError as e:
            logger.warning(f"Rejected {operation} for client {client_id}: {e}")
            raise

        self.data_service.save_client(updated)
        if updated.status != client.status:
            logger.info(f"Client {client_id}: {client.status.value} -> {updated.status.value} ({operation})")
        return updated

    def generate_demo_artifacts(self, client_id: str) -> Optional[Client]:
        return self._transition(client_id, 'generate_demo_artifacts', generate_demo_artifacts)

    def approve(self, client_id: str) -> Optional[Client]:
        return self._transition(client_id, 'approve', approve)

    def generate_production_artifacts(self, client_id: str) -> Optional[Client]:
        return self._transition(client_id, 'generate_production_artifacts', generate_production_artifacts)

    def promote_to_production(self, client_id: str) -> Optional[Client]:
        return self._transition(client_id, 'promote_to_production', promote_to_production)

    def publish(self, client_id: str, voice_id: str, phone_number: str = None) -> Optional[Client]:
        return self._transition(client_id, 'publish', publish_to_production, voice_id, phone_number)

    # ---------- deletion ----------

    def delete_client(self, client_id: str, cascade_links: bool = False) -> bool:
        """
        Permanently remove a client.

        Demo links pointing at it are left alone unless `cascade_links`.
        """
        deleted = self.data_service.delete_client(client_id)
        if deleted and cascade_links:
            for link in self.data_service.get_demo_links_by_client(client_id):
                self.data_service.delete_demo_link(link.id)
        if deleted:
            logger.info(f"Deleted client {client_id} (cascade_links={cascade_links})")
        return deleted
