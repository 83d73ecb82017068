"""Tests for GPIOLights — mocks gpiozero so tests run on any platform."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from trafficlight.core.models.config import HardwareConfig
from trafficlight.core.models.state import FAULT_OUTPUTS, Output

LIGHT_PINS = {"green": 27, "orange": 18, "red": 4}


def _make_config() -> HardwareConfig:
    return HardwareConfig(light_pins=LIGHT_PINS)


def _per_pin(MockLED) -> dict[int, MagicMock]:
    leds: dict[int, MagicMock] = {}
    MockLED.side_effect = lambda pin, **_kw: leds.setdefault(pin, MagicMock())
    return leds


class TestGPIOLights:
    @patch("trafficlight.hardware.gpio.gpio_hardware.LED")
    def test_creates_leds_with_correct_pins(self, MockLED):
        from trafficlight.hardware.gpio.gpio_hardware import GPIOLights

        GPIOLights(_make_config())
        created_pins = {call.args[0] for call in MockLED.call_args_list}
        assert created_pins == {27, 18, 4}
        for call in MockLED.call_args_list:
            assert call.kwargs["initial_value"] is False

    @patch("trafficlight.hardware.gpio.gpio_hardware.LED")
    def test_write_single_lamp(self, MockLED):
        from trafficlight.hardware.gpio.gpio_hardware import GPIOLights

        leds = _per_pin(MockLED)
        lights = GPIOLights(_make_config())

        lights.write({Output.GREEN})

        leds[27].on.assert_called_once()
        leds[18].off.assert_called_once()
        leds[4].off.assert_called_once()
        assert lights.displayed == {Output.GREEN}

    @patch("trafficlight.hardware.gpio.gpio_hardware.LED")
    def test_write_composite(self, MockLED):
        from trafficlight.hardware.gpio.gpio_hardware import GPIOLights

        leds = _per_pin(MockLED)
        lights = GPIOLights(_make_config())

        lights.write(FAULT_OUTPUTS)

        leds[18].on.assert_called_once()
        leds[4].on.assert_called_once()
        leds[27].off.assert_called_once()
        assert lights.displayed == FAULT_OUTPUTS

    @patch("trafficlight.hardware.gpio.gpio_hardware.LED")
    def test_displayed_default_empty(self, MockLED):
        from trafficlight.hardware.gpio.gpio_hardware import GPIOLights

        assert GPIOLights(_make_config()).displayed == frozenset()

    @patch("trafficlight.hardware.gpio.gpio_hardware.LED")
    def test_cleanup_turns_off_and_closes(self, MockLED):
        from trafficlight.hardware.gpio.gpio_hardware import GPIOLights

        leds = _per_pin(MockLED)
        lights = GPIOLights(_make_config())
        lights.write({Output.RED})

        lights.cleanup()

        for led in leds.values():
            led.close.assert_called_once()
        assert leds[4].off.called
        assert lights.displayed == frozenset()
