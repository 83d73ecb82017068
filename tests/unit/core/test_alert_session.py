"""Tests for AlertSession frames and timer lifecycle."""

from __future__ import annotations

import time

from trafficlight.core.alert_session import AlertSession
from trafficlight.core.models.state import Output
from tests.helpers.runtime import wait_for_sync


class TestAlertSession:
    def test_frames_alternate_orange_first(self):
        session = AlertSession(1, 10.0, lambda _sid: None)
        frames = [session.next_frame() for _ in range(4)]
        assert frames == [
            frozenset({Output.ORANGE}),
            frozenset({Output.RED}),
            frozenset({Output.ORANGE}),
            frozenset({Output.RED}),
        ]

    def test_ticks_carry_session_id(self):
        ticks: list[int] = []
        session = AlertSession(7, 0.01, ticks.append)
        session.start()
        try:
            wait_for_sync(lambda: len(ticks) >= 2)
        finally:
            session.cancel()
        assert set(ticks) == {7}

    def test_cancel_is_synchronous(self):
        ticks: list[int] = []
        session = AlertSession(1, 0.005, ticks.append)
        session.start()
        wait_for_sync(lambda: len(ticks) >= 1)

        session.cancel()
        count = len(ticks)
        time.sleep(0.05)

        assert len(ticks) == count
        assert not session.active

    def test_cancel_twice_is_noop(self):
        session = AlertSession(1, 10.0, lambda _sid: None)
        session.start()
        session.cancel()
        session.cancel()
        assert not session.active
