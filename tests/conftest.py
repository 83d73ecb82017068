"""Shared pytest fixtures for traffic light client tests."""

from __future__ import annotations

import pytest

from trafficlight.config.secrets_manager import SecretsManager
from trafficlight.core.event_bus import EventBus
from trafficlight.core.models.config import TrafficLightConfig
from trafficlight.hardware.mock.mock_factory import MockHardwareFactory
from trafficlight.hardware.mock.mock_hardware import MockLights


@pytest.fixture
def event_bus():
    """Provide a started EventBus that is stopped after the test."""
    bus = EventBus(queue_size=100)
    bus.start()
    yield bus
    bus.stop()


@pytest.fixture
def config() -> TrafficLightConfig:
    """Default config (no file I/O), with instant bootstrap and fast blink."""
    cfg = TrafficLightConfig()
    cfg.system.bootstrap_step_ms = 0
    cfg.system.alert_period_ms = 20
    cfg.system.dev_mode = True
    return cfg


@pytest.fixture
def mock_factory() -> MockHardwareFactory:
    return MockHardwareFactory()


@pytest.fixture
def lights() -> MockLights:
    return MockLights()


@pytest.fixture
def secrets(monkeypatch) -> SecretsManager:
    """Fresh SecretsManager that cannot see a real secrets file."""
    monkeypatch.setenv("TRAFFICLIGHT_SECRETS_FILE", "/nonexistent/secrets.env")
    return SecretsManager()
