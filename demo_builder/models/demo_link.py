"""
Voice Agent Demo Builder - Demo Link Model
Shareable, time-boxed pointer to a client demo
"""
from datetime import datetime
from typing import Optional
from dataclasses import dataclass, field
import secrets

from demo_builder.utils import utcnow, to_iso, parse_datetime


DEFAULT_MAX_DURATION_SECONDS = 120


@dataclass
class DemoLink:
    """Demo link model. References a client by id only."""

    id: str
    client_id: str
    slug: str

    created_at: datetime = field(default_factory=utcnow)
    expires_at: Optional[datetime] = None          # None = never expires
    max_duration_seconds: int = DEFAULT_MAX_DURATION_SECONDS
    is_active: bool = True
    usage_count: int = 0
    demo_phone_number: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            self.id = f"link_{secrets.token_urlsafe(12)}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "client_id": self.client_id,
            "slug": self.slug,
            "created_at": to_iso(self.created_at),
            "expires_at": to_iso(self.expires_at),
            "max_duration_seconds": self.max_duration_seconds,
            "is_active": self.is_active,
            "usage_count": self.usage_count,
            "demo_phone_number": self.demo_phone_number
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DemoLink":
        return cls(
            id=data.get('id', ''),
            client_id=data.get('client_id', ''),
            slug=data.get('slug', ''),
            created_at=parse_datetime(data.get('created_at')) or utcnow(),
            expires_at=parse_datetime(data.get('expires_at')),
            max_duration_seconds=data.get('max_duration_seconds', DEFAULT_MAX_DURATION_SECONDS),
            is_active=data.get('is_active', True),
            usage_count=data.get('usage_count', 0),
            demo_phone_number=data.get('demo_phone_number')
        )
