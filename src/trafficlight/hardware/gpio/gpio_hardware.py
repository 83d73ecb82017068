"""GPIO hardware implementations for Raspberry Pi.

Each class implements the corresponding ABC from
:mod:`trafficlight.core.interfaces.hardware` using ``gpiozero``.

Pin factory (``LGPIOFactory``) is set **once** by
:class:`~trafficlight.hardware.gpio.gpio_factory.GPIOHardwareFactory`
before any objects in this module are instantiated.  Unit tests patch the
module-level ``LED`` and ``Button`` names.
"""

from __future__ import annotations

import logging as _logging
from collections.abc import Iterable
from typing import Callable

from gpiozero import LED, Button  # type: ignore[import-untyped]

from trafficlight.core.interfaces.hardware import ButtonInterface, LightsInterface
from trafficlight.core.models.config import HardwareConfig
from trafficlight.core.models.state import Edge, Output

_log = _logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lights
# ---------------------------------------------------------------------------

class GPIOLights(LightsInterface):
    """The three lamps via ``gpiozero.LED``; all start off."""

    def __init__(self, config: HardwareConfig) -> None:
        self._leds: dict[Output, object] = {}
        for output in Output:
            pin = config.light_pins[output.value]
            self._leds[output] = LED(pin, initial_value=False)
        self._displayed: frozenset[Output] = frozenset()

        _log.info("GPIOLights initialised: %s", dict(config.light_pins))

    # -- ABC implementation --

    def write(self, outputs: Iterable[Output]) -> None:
        lit = frozenset(outputs)
        for output, led in self._leds.items():
            if output in lit:
                led.on()  # type: ignore[attr-defined]
            else:
                led.off()  # type: ignore[attr-defined]
        self._displayed = lit

    @property
    def displayed(self) -> frozenset[Output]:
        return self._displayed

    # -- Lifecycle --

    def cleanup(self) -> None:
        if self._leds:
            self.write(())
        for led in self._leds.values():
            led.close()  # type: ignore[attr-defined]
        self._leds.clear()
        _log.debug("GPIOLights cleaned up")


# ---------------------------------------------------------------------------
# Button
# ---------------------------------------------------------------------------

class GPIOButton(ButtonInterface):
    """Push button via ``gpiozero.Button`` with the internal pull-up.

    gpiozero's own ``bounce_time`` is disabled: raw edges are reported
    and the :class:`~trafficlight.core.input_source.ButtonDebouncer`
    applies the quiet period.
    """

    def __init__(self, config: HardwareConfig) -> None:
        self._button = Button(config.button_pin, pull_up=True, bounce_time=None)
        _log.info("GPIOButton initialised on pin %d", config.button_pin)

    def register_edge_callback(self, callback: Callable[[Edge], None]) -> None:
        self._button.when_pressed = lambda: callback(Edge.FALLING)
        self._button.when_released = lambda: callback(Edge.RISING)

    def cleanup(self) -> None:
        self._button.close()
        _log.debug("GPIOButton cleaned up")
