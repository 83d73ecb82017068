"""Mock hardware backend for development and testing."""

from trafficlight.hardware.mock.mock_factory import MockHardwareFactory
from trafficlight.hardware.mock.mock_hardware import MockButton, MockLights

__all__ = [
    "MockButton",
    "MockHardwareFactory",
    "MockLights",
]
