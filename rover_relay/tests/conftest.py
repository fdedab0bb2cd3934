"""Shared fixtures for relay and web tests."""

from __future__ import annotations

import pytest

from rover_relay.relay import CameraRelay
from rover_relay.service.config import AppConfig
from rover_relay.web import create_app


class FakeClock:
    """Manually advanced millisecond clock; can be told to fail its next reading."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.fail_next = False

    def __call__(self) -> float:
        if self.fail_next:
            self.fail_next = False
            raise RuntimeError("clock unavailable")
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def relay(clock: FakeClock):
    relay = CameraRelay(clock=clock)
    yield relay
    relay.activity.close()


@pytest.fixture
def app(relay: CameraRelay):
    app = create_app(AppConfig.default(), relay=relay)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
