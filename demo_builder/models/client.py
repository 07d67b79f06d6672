"""
Voice Agent Demo Builder - Client Model
Represents a business whose voice agent moves through the demo pipeline
"""
from datetime import datetime
from typing import Optional, List, Dict, Union
from dataclasses import dataclass, field
from enum import Enum
import secrets

from demo_builder.utils import utcnow, to_iso, parse_datetime


class ClientStatus(Enum):
    DRAFT = "draft"
    DEMO_READY = "demo_ready"
    APPROVED = "approved"
    PRODUCTION = "production"


STATUS_LABELS = {
    ClientStatus.DRAFT: "Draft",
    ClientStatus.DEMO_READY: "Demo Ready",
    ClientStatus.APPROVED: "Approved",
    ClientStatus.PRODUCTION: "Production",
}


class AfterHoursGoal(Enum):
    LEAD_CAPTURE = "lead_capture"
    VOICEMAIL = "voicemail"
    EMERGENCY_TRANSFER = "emergency_transfer"


class Tone(Enum):
    PROFESSIONAL = "professional"
    FRIENDLY = "friendly"
    CASUAL = "casual"
    FORMAL = "formal"


# ==========================================
# Transfer rules (tagged on `action`)
# ==========================================

@dataclass(frozen=True)
class TransferCall:
    """Transfer the caller to a phone number when the condition matches"""
    condition: str
    phone: Optional[str] = None

    action = "transfer"


@dataclass(frozen=True)
class UrgentFlag:
    """Flag the call as urgent for the team"""
    condition: str

    action = "urgent_flag"


@dataclass(frozen=True)
class CustomMessage:
    """Respond with a business-specific message"""
    condition: str

    action = "custom_message"


TransferRule = Union[TransferCall, UrgentFlag, CustomMessage]

_RULE_TYPES = {
    TransferCall.action: TransferCall,
    UrgentFlag.action: UrgentFlag,
    CustomMessage.action: CustomMessage,
}


def transfer_rule_from_dict(data: dict) -> TransferRule:
    """Build the rule variant named by `action`; unknown actions become custom messages"""
    condition = data.get('condition', '')
    rule_type = _RULE_TYPES.get(data.get('action'), CustomMessage)
    if rule_type is TransferCall:
        return TransferCall(condition=condition, phone=data.get('phone') or None)
    return rule_type(condition=condition)


def transfer_rule_to_dict(rule: TransferRule) -> dict:
    data = {"condition": rule.condition, "action": rule.action}
    if isinstance(rule, TransferCall) and rule.phone:
        data["phone"] = rule.phone
    return data


def normalize_services(services: Optional[List[str]]) -> List[str]:
    """Strip blanks and drop duplicates, keeping first-seen order"""
    seen = []
    for service in services or []:
        name = (service or '').strip()
        if name and name not in seen:
            seen.append(name)
    return seen


# ==========================================
# Nested value objects
# ==========================================

@dataclass
class BusinessHours:
    weekday: str = "9:00 AM - 5:00 PM"
    weekend: str = "Closed"
    timezone: str = "America/New_York"

    def to_dict(self) -> dict:
        return {"weekday": self.weekday, "weekend": self.weekend, "timezone": self.timezone}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "BusinessHours":
        data = data or {}
        defaults = cls()
        return cls(
            weekday=data.get('weekday', defaults.weekday),
            weekend=data.get('weekend', defaults.weekend),
            timezone=data.get('timezone', defaults.timezone)
        )


@dataclass
class WebsiteContext:
    """Business details scraped from the client's website"""

    description: Optional[str] = None
    tagline: Optional[str] = None
    about_us: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    raw_content: Optional[str] = None
    scraped_services: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "tagline": self.tagline,
            "about_us": self.about_us,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "raw_content": self.raw_content,
            "scraped_services": self.scraped_services
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["WebsiteContext"]:
        if not data:
            return None
        return cls(
            description=data.get('description'),
            tagline=data.get('tagline'),
            about_us=data.get('about_us'),
            phone=data.get('phone'),
            email=data.get('email'),
            address=data.get('address'),
            raw_content=data.get('raw_content'),
            scraped_services=data.get('scraped_services') or []
        )

    @classmethod
    def from_scraped(cls, bag: Optional[Dict]) -> "WebsiteContext":
        """
        Build from the scraper's field bag.

        The bag uses camelCase keys (aboutUs, rawContent) and any key may be
        missing or empty.
        """
        bag = bag or {}

        def text(key):
            value = bag.get(key)
            if isinstance(value, str):
                value = value.strip()
            return value or None

        return cls(
            description=text('description'),
            tagline=text('tagline'),
            about_us=text('aboutUs'),
            phone=text('phone'),
            email=text('email'),
            address=text('address'),
            raw_content=text('rawContent'),
            scraped_services=normalize_services(bag.get('services'))
        )


@dataclass
class Artifacts:
    demo_config: Optional[str] = None
    demo_system_prompt: Optional[str] = None
    client_test_instructions: Optional[str] = None
    production_system_prompt: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "demo_config": self.demo_config,
            "demo_system_prompt": self.demo_system_prompt,
            "client_test_instructions": self.client_test_instructions,
            "production_system_prompt": self.production_system_prompt
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Artifacts":
        data = data or {}
        return cls(
            demo_config=data.get('demo_config'),
            demo_system_prompt=data.get('demo_system_prompt'),
            client_test_instructions=data.get('client_test_instructions'),
            production_system_prompt=data.get('production_system_prompt')
        )


@dataclass
class ProductionDetails:
    approved_at: Optional[datetime] = None
    voice_id: Optional[str] = None
    phone_number: Optional[str] = None
    crm_integration: Optional[str] = None
    calendar_integration: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "approved_at": to_iso(self.approved_at),
            "voice_id": self.voice_id,
            "phone_number": self.phone_number,
            "crm_integration": self.crm_integration,
            "calendar_integration": self.calendar_integration
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["ProductionDetails"]:
        if not data:
            return None
        return cls(
            approved_at=parse_datetime(data.get('approved_at')),
            voice_id=data.get('voice_id'),
            phone_number=data.get('phone_number'),
            crm_integration=data.get('crm_integration'),
            calendar_integration=data.get('calendar_integration')
        )


# ==========================================
# Client
# ==========================================

@dataclass
class Client:
    """Client demo record for the voice agent pipeline"""

    id: str
    business_name: str
    industry: str                    # free text, matched against knowledge bases

    services: List[str] = field(default_factory=list)
    service_area: str = ""
    website_url: Optional[str] = None
    hours: BusinessHours = field(default_factory=BusinessHours)

    # Agent behavior
    after_hours_goal: AfterHoursGoal = AfterHoursGoal.LEAD_CAPTURE
    tone: Tone = Tone.PROFESSIONAL
    transfer_rules: List[TransferRule] = field(default_factory=list)

    website_data: Optional[WebsiteContext] = None

    # Lifecycle
    status: ClientStatus = ClientStatus.DRAFT
    artifacts: Artifacts = field(default_factory=Artifacts)
    production_details: Optional[ProductionDetails] = None

    # Timestamps
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        if not self.id:
            self.id = f"client_{secrets.token_urlsafe(12)}"
        self.services = normalize_services(self.services)

    def touch(self) -> None:
        """Stamp a mutation"""
        self.updated_at = utcnow()

    @property
    def status_label(self) -> str:
        return STATUS_LABELS[self.status]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "business_name": self.business_name,
            "industry": self.industry,
            "services": self.services,
            "service_area": self.service_area,
            "website_url": self.website_url,
            "hours": self.hours.to_dict(),
            "after_hours_goal": self.after_hours_goal.value,
            "tone": self.tone.value,
            "transfer_rules": [transfer_rule_to_dict(r) for r in self.transfer_rules],
            "website_data": self.website_data.to_dict() if self.website_data else None,
            "status": self.status.value,
            "status_label": self.status_label,
            "artifacts": self.artifacts.to_dict(),
            "production_details": self.production_details.to_dict() if self.production_details else None,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at)
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Client":
        """
        Create Client from dictionary

        Raises ValueError when status, tone or after_hours_goal hold a value
        outside their enumerations.
        """
        return cls(
            id=data.get('id', ''),
            business_name=data.get('business_name', ''),
            industry=data.get('industry', ''),
            services=data.get('services', []),
            service_area=data.get('service_area', ''),
            website_url=data.get('website_url'),
            hours=BusinessHours.from_dict(data.get('hours')),
            after_hours_goal=AfterHoursGoal(data.get('after_hours_goal') or 'lead_capture'),
            tone=Tone(data.get('tone') or 'professional'),
            transfer_rules=[transfer_rule_from_dict(r) for r in data.get('transfer_rules') or []],
            website_data=WebsiteContext.from_dict(data.get('website_data')),
            status=ClientStatus(data.get('status') or 'draft'),
            artifacts=Artifacts.from_dict(data.get('artifacts')),
            production_details=ProductionDetails.from_dict(data.get('production_details')),
            created_at=parse_datetime(data.get('created_at')) or utcnow(),
            updated_at=parse_datetime(data.get('updated_at')) or utcnow()
        )


def create_client(
    business_name: str,
    industry: str,
    service_area: str,
    services: List[str] = None,
    **profile
) -> Client:
    """Factory function to create a new draft client"""
    now = utcnow()
    return Client(
        id=f"client_{secrets.token_urlsafe(12)}",
        business_name=business_name,
        industry=industry,
        service_area=service_area,
        services=services or [],
        created_at=now,
        updated_at=now,
        **profile
    )
