"""GPIOHardwareFactory — real lamps and button on a Raspberry Pi.

The ``gpiozero`` pin factory is switched to ``LGPIOFactory`` (required on
the Pi 5) before any device is opened.  Lamps and button are opened once,
up front, and handed out on every ``create_*`` call.
"""

from __future__ import annotations

import logging as _logging

from gpiozero import Device  # type: ignore[import-untyped]

from trafficlight.core.interfaces.hardware import (
    ButtonInterface,
    HardwareFactory,
    LightsInterface,
)
from trafficlight.core.models.config import TrafficLightConfig
from trafficlight.hardware.gpio.gpio_hardware import GPIOButton, GPIOLights

_log = _logging.getLogger(__name__)


def _setup_pin_factory() -> None:
    """Select ``LGPIOFactory``; keep gpiozero's default if lgpio is absent."""
    try:
        from gpiozero.pins.lgpio import LGPIOFactory  # type: ignore[import-untyped]
    except ImportError:
        _log.warning("lgpio not installed; using gpiozero's default pin factory")
        return
    Device.pin_factory = LGPIOFactory()
    _log.info("gpiozero pin factory: LGPIOFactory")


class GPIOHardwareFactory(HardwareFactory):
    """Opens the BCM pins named in ``config.hardware``.

    Args:
        config: Full configuration.
    """

    def __init__(self, config: TrafficLightConfig) -> None:
        _setup_pin_factory()
        self._lights = GPIOLights(config.hardware)
        self._button = GPIOButton(config.hardware)
        _log.info("GPIO lamps and button ready")

    def create_lights(self) -> LightsInterface:
        return self._lights

    def create_button(self) -> ButtonInterface:
        return self._button

    def cleanup(self) -> None:
        """Detach the button first, then switch the lamps off and close them.

        A failure closing one device is logged; the other is still closed.
        """
        for device in (self._button, self._lights):
            try:
                device.cleanup()
            except Exception:
                _log.exception("Closing %s failed", type(device).__name__)
        _log.info("GPIO released")
