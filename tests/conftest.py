import random

import pytest
from fastapi.testclient import TestClient

from config import REGIONS_PATH, Settings
from main import create_app
from services.alert_registry import AlertRegistry
from services.region_store import RegionStore


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return RegionStore.from_seed(REGIONS_PATH)


@pytest.fixture
def registry():
    return AlertRegistry()


@pytest.fixture
def app(store, registry, clock):
    settings = Settings(simulation_enabled=False)
    return create_app(settings, store=store, registry=registry, rng=random.Random(7), clock=clock)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
