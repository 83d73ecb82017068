"""Tests for GPIOHardwareFactory — mocks all GPIO classes."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from trafficlight.core.interfaces.hardware import (
    ButtonInterface,
    HardwareFactory,
    LightsInterface,
)
from trafficlight.core.models.config import TrafficLightConfig


class TestGPIOHardwareFactory:
    @patch("trafficlight.hardware.gpio.gpio_factory._setup_pin_factory")
    @patch("trafficlight.hardware.gpio.gpio_hardware.LED", new_callable=MagicMock)
    @patch("trafficlight.hardware.gpio.gpio_hardware.Button", new_callable=MagicMock)
    def test_creates_all_interfaces(self, _btn, _led, setup):
        from trafficlight.hardware.gpio.gpio_factory import GPIOHardwareFactory

        factory = GPIOHardwareFactory(TrafficLightConfig())

        setup.assert_called_once()
        assert isinstance(factory, HardwareFactory)
        assert isinstance(factory.create_lights(), LightsInterface)
        assert isinstance(factory.create_button(), ButtonInterface)

    @patch("trafficlight.hardware.gpio.gpio_factory._setup_pin_factory")
    @patch("trafficlight.hardware.gpio.gpio_hardware.LED", new_callable=MagicMock)
    @patch("trafficlight.hardware.gpio.gpio_hardware.Button", new_callable=MagicMock)
    def test_same_instances_returned(self, _btn, _led, _setup):
        from trafficlight.hardware.gpio.gpio_factory import GPIOHardwareFactory

        factory = GPIOHardwareFactory(TrafficLightConfig())
        assert factory.create_lights() is factory.create_lights()
        assert factory.create_button() is factory.create_button()

    @patch("trafficlight.hardware.gpio.gpio_factory._setup_pin_factory")
    @patch("trafficlight.hardware.gpio.gpio_hardware.LED", new_callable=MagicMock)
    @patch("trafficlight.hardware.gpio.gpio_hardware.Button", new_callable=MagicMock)
    def test_cleanup_survives_component_error(self, MockButton, MockLED, _setup):
        from trafficlight.hardware.gpio.gpio_factory import GPIOHardwareFactory

        led = MagicMock()
        MockLED.return_value = led
        MockButton.return_value.close.side_effect = RuntimeError("pin busy")
        factory = GPIOHardwareFactory(TrafficLightConfig())

        factory.cleanup()

        assert led.close.called
