"""
Shared fixtures: a controllable clock, a fake prediction client and recording hooks.
"""

import pytest
from unittest.mock import AsyncMock, Mock
from prewarm.config import WarmerConfig
from prewarm.warmer.hooks import WarmingHooks
from prewarm.warmer.scheduler import WarmingScheduler
from prewarm.warmer.state import Prediction

T0 = 1_000_000.0
DUMMY_SOURCE = "data:image/jpeg;base64,AAAA"


class FakeClock:
    def __init__(self, now: float = T0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeClient:
    """Stands in for PredictionClient inside `async with`."""

    def __init__(self, created=None, polls=(), create_error=None):
        self.create_warm_prediction = AsyncMock(side_effect=create_error, return_value=created)
        self.get_prediction = AsyncMock(side_effect=list(polls))

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class RecordingHooks(WarmingHooks):
    def __init__(self):
        self.started = 0
        self.completed = 0
        self.errors = []

    def on_warming_start(self):
        self.started += 1

    def on_warming_complete(self):
        self.completed += 1

    def on_warming_error(self, error):
        self.errors.append(error)


def prediction(status: str, **extra) -> Prediction:
    return Prediction(predictionId="pred-123", status=status, **extra)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def hooks():
    return RecordingHooks()


@pytest.fixture
def client():
    return FakeClient(created=prediction("succeeded"))


@pytest.fixture
def client_factory(client):
    return Mock(return_value=client)


@pytest.fixture
def scheduler(hooks, client_factory, clock):
    return WarmingScheduler(
        WarmerConfig(cooldown_period=10.0, poll_interval=0.001, hooks=hooks),
        client_factory=client_factory,
        image_factory=lambda: DUMMY_SOURCE,
        clock=clock,
    )
