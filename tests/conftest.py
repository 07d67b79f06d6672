"""
Voice Agent Demo Builder - Test Fixtures
"""
import pytest
from datetime import datetime, timedelta, timezone

from demo_builder import create_app
from demo_builder.models.client import (
    AfterHoursGoal,
    Tone,
    TransferCall,
    UrgentFlag,
    create_client
)
from demo_builder.services import DataService, LifecycleService, DemoLinkService


FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Controllable clock; call it to read, advance() to move forward"""

    def __init__(self, now=FIXED_NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def data_service(tmp_path):
    return DataService(str(tmp_path / 'data'))


@pytest.fixture
def lifecycle(data_service, clock):
    return LifecycleService(data_service, clock=clock)


@pytest.fixture
def links(data_service, clock):
    return DemoLinkService(data_service, clock=clock)


@pytest.fixture
def plumber():
    """Joe's Plumbing with an emergency transfer rule"""
    return create_client(
        business_name="Joe's Plumbing",
        industry="Plumbing",
        service_area="Austin, TX",
        services=["Drain Cleaning", "Water Heater"],
        after_hours_goal=AfterHoursGoal.EMERGENCY_TRANSFER,
        tone=Tone.FRIENDLY,
        transfer_rules=[
            TransferCall(condition="gas smell", phone="555-0101"),
            UrgentFlag(condition="flooding"),
        ]
    )


@pytest.fixture
def app(tmp_path):
    app = create_app('testing', data_dir=str(tmp_path / 'api-data'))
    yield app


@pytest.fixture
def api(app):
    return app.test_client()
