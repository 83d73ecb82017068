"""Hardware factory — platform detection and factory creation.

Selects GPIO on Raspberry Pi, Mock on everything else (dev machines, CI).
"""

from __future__ import annotations

import logging

from trafficlight.core.interfaces.hardware import HardwareFactory
from trafficlight.core.models.config import TrafficLightConfig

_log = logging.getLogger(__name__)


def _is_raspberry_pi() -> bool:
    """Return ``True`` if running on a Raspberry Pi."""
    try:
        with open("/sys/firmware/devicetree/base/model") as f:
            model = f.read().lower()
        return "raspberry pi" in model
    except OSError:
        return False


def create_hardware_factory(config: TrafficLightConfig) -> HardwareFactory:
    """Return the appropriate :class:`HardwareFactory` for the platform.

    * On Raspberry Pi (detected via device-tree) → ``GPIOHardwareFactory``.
    * Everywhere else, or if ``dev_mode`` is ``True`` → ``MockHardwareFactory``
      (and ``dev_mode`` is switched on so the rest of the system knows).
    """
    is_pi = _is_raspberry_pi()
    if config.system.dev_mode or not is_pi:
        from trafficlight.hardware.mock.mock_factory import MockHardwareFactory

        config.system.dev_mode = True
        _log.info("Using MockHardwareFactory (is_pi=%s)", is_pi)
        return MockHardwareFactory()

    from trafficlight.hardware.gpio.gpio_factory import GPIOHardwareFactory

    _log.info("Using GPIOHardwareFactory")
    return GPIOHardwareFactory(config)
