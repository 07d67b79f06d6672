"""
Voice Agent Demo Builder - Data Models
Dataclass models persisted as JSON records
"""
from demo_builder.models.client import (
    Client,
    ClientStatus,
    AfterHoursGoal,
    Tone,
    TransferCall,
    UrgentFlag,
    CustomMessage,
    BusinessHours,
    WebsiteContext,
    Artifacts,
    ProductionDetails,
    create_client
)
from demo_builder.models.demo_link import DemoLink

__all__ = [
    'Client',
    'ClientStatus',
    'AfterHoursGoal',
    'Tone',
    'TransferCall',
    'UrgentFlag',
    'CustomMessage',
    'BusinessHours',
    'WebsiteContext',
    'Artifacts',
    'ProductionDetails',
    'create_client',
    'DemoLink'
]
