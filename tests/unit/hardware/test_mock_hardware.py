"""Tests for the mock hardware backend."""

from __future__ import annotations

from trafficlight.core.interfaces.hardware import ButtonInterface, LightsInterface
from trafficlight.core.models.state import Edge, Output
from trafficlight.hardware.mock.mock_factory import MockHardwareFactory
from trafficlight.hardware.mock.mock_hardware import MockButton, MockLights


class TestMockLights:
    def test_initially_dark(self):
        lights = MockLights()
        assert lights.displayed == frozenset()
        assert lights.history == []

    def test_write_replaces_display(self):
        lights = MockLights()
        lights.write({Output.RED, Output.GREEN})
        lights.write([Output.ORANGE])

        assert lights.displayed == {Output.ORANGE}
        assert lights.is_lit(Output.ORANGE)
        assert not lights.is_lit(Output.RED)
        assert lights.history == [
            frozenset({Output.RED, Output.GREEN}),
            frozenset({Output.ORANGE}),
        ]


class TestMockButton:
    def test_simulate_press_is_falling_edge(self):
        button = MockButton()
        edges: list[Edge] = []
        button.register_edge_callback(edges.append)

        button.simulate_press()
        button.simulate_edge(Edge.RISING)

        assert edges == [Edge.FALLING, Edge.RISING]

    def test_simulate_without_callback(self):
        MockButton().simulate_press()


class TestMockHardwareFactory:
    def test_creates_all_interfaces(self):
        factory = MockHardwareFactory()
        assert isinstance(factory.create_lights(), LightsInterface)
        assert isinstance(factory.create_button(), ButtonInterface)

    def test_exposes_instances(self):
        factory = MockHardwareFactory()
        assert factory.create_lights() is factory.lights
        assert factory.create_button() is factory.button

    def test_cleanup_is_noop(self):
        MockHardwareFactory().cleanup()
