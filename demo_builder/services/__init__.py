"""
Voice Agent Demo Builder - Services
Lifecycle rules, artifact generation, demo links and persistence
"""
from demo_builder.services.data_service import DataService
from demo_builder.services.lifecycle_service import LifecycleService
from demo_builder.services.demo_link_service import DemoLinkService, LinkStatus

__all__ = [
    'DataService',
    'LifecycleService',
    'DemoLinkService',
    'LinkStatus'
]
