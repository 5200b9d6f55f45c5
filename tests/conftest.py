# file: tests/conftest.py

import pytest
from fastapi.testclient import TestClient

from backend.database import create_db_engine
from backend.main import app, get_service
from backend.models import AirQualityUpdatePayload
from backend.service import AirQualityService

START_TIMESTAMP = 1_700_000_000_000_000_000
STEP = 1_000_000_000


class FakeClock:
    """Returns START_TIMESTAMP, then advances by STEP on every call."""

    def __init__(self, start: int = START_TIMESTAMP, step: int = STEP) -> None:
        self.start = start
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def clock_factory():
    return FakeClock


@pytest.fixture
def service(engine, clock):
    return AirQualityService.from_engine(engine, clock)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_payload():
    """Build an AirQualityUpdatePayload with sensible defaults."""

    def _make(location="Warsaw Centrum", air_quality_index=42, health_recommendations="Enjoy the outdoors",
              pollutant_levels=None, weather_conditions=None):
        return AirQualityUpdatePayload(
            location=location,
            air_quality_index=air_quality_index,
            health_recommendations=health_recommendations,
            pollutant_levels=pollutant_levels,
            weather_conditions=weather_conditions,
        )

    return _make
