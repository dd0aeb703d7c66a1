"""Shared fixtures: a controllable clock, a fresh store and an HTTP client."""

import pytest
from fastapi.testclient import TestClient

from backend.api.main import create_app
from backend.relay.config import RelayConfig
from backend.relay.finding_store import FindingStore

START_MS = 1_700_000_000_000


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> FindingStore:
    return FindingStore(clock=clock)


@pytest.fixture
def client(store) -> TestClient:
    app = create_app(config=RelayConfig(), store=store)
    with TestClient(app) as test_client:
        yield test_client
