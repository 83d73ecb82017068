"""MockHardwareFactory — creates in-memory hardware for dev and test.

All created instances are stored as public attributes so tests can
access ``simulate_*()`` helpers directly.
"""

from __future__ import annotations

from trafficlight.core.interfaces.hardware import (
    ButtonInterface,
    HardwareFactory,
    LightsInterface,
)
from trafficlight.hardware.mock.mock_hardware import MockButton, MockLights


class MockHardwareFactory(HardwareFactory):
    """Factory that returns in-memory mock implementations.

    After creation, the individual mock objects are available as attributes
    (``factory.lights``, ``factory.button``).
    """

    def __init__(self) -> None:
        self.lights = MockLights()
        self.button = MockButton()

    # -- Factory interface --

    def create_lights(self) -> LightsInterface:
        return self.lights

    def create_button(self) -> ButtonInterface:
        return self.button
