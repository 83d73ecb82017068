"""Tests for the startup lamp test."""

from __future__ import annotations

from trafficlight.core.event_bus import EventBus
from trafficlight.core.models.state import LightColor, Output
from trafficlight.core.reconciler import BOOTSTRAP_SEQUENCE, Reconciler
from tests.helpers.fakes import FakeTransport


class TestBootstrap:
    def test_each_lamp_alone_then_off(self, lights):
        sleeps: list[float] = []
        rec = Reconciler(
            lights, FakeTransport(), EventBus(), bootstrap_step_s=1.0, sleep=sleeps.append,
        )

        rec.bootstrap()

        assert lights.history == [
            frozenset({Output.GREEN}),
            frozenset({Output.ORANGE}),
            frozenset({Output.RED}),
            frozenset(),
        ]
        assert sleeps == [1.0, 1.0, 1.0]
        assert rec.state is LightColor.OFF

    def test_sequence_order(self):
        assert BOOTSTRAP_SEQUENCE == (LightColor.GREEN, LightColor.ORANGE, LightColor.RED)

    def test_no_transport_activity(self, lights):
        transport = FakeTransport()
        rec = Reconciler(lights, transport, EventBus(), sleep=lambda _s: None)

        rec.bootstrap()

        assert transport.subscribe_calls == 0
        assert transport.reports == []

    def test_state_is_none_before_bootstrap(self, lights):
        rec = Reconciler(lights, FakeTransport(), EventBus(), sleep=lambda _s: None)
        assert rec.state is None
