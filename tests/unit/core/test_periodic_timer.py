"""Tests for PeriodicTimer start / cancel semantics."""

from __future__ import annotations

import threading
import time

import pytest

from trafficlight.core.periodic_timer import PeriodicTimer
from tests.helpers.runtime import wait_for_sync


class TestPeriodicTimer:
    def test_ticks_repeatedly(self):
        ticks: list[float] = []
        timer = PeriodicTimer(0.01, lambda: ticks.append(time.monotonic()))
        timer.start()
        try:
            wait_for_sync(lambda: len(ticks) >= 3)
        finally:
            timer.cancel()

    def test_first_tick_after_one_interval(self):
        ticks: list[int] = []
        timer = PeriodicTimer(10.0, lambda: ticks.append(1))
        timer.start()
        timer.cancel()
        assert ticks == []

    def test_no_tick_after_cancel_returns(self):
        ticks: list[int] = []
        timer = PeriodicTimer(0.005, lambda: ticks.append(1))
        timer.start()
        wait_for_sync(lambda: len(ticks) >= 1)

        timer.cancel()
        count = len(ticks)
        time.sleep(0.05)

        assert len(ticks) == count
        assert not timer.is_running

    def test_cancel_waits_for_in_flight_tick(self):
        entered = threading.Event()
        finished = threading.Event()

        def slow():
            entered.set()
            time.sleep(0.05)
            finished.set()

        timer = PeriodicTimer(0.001, slow)
        timer.start()
        assert entered.wait(2.0)
        timer.cancel()
        assert finished.is_set()

    def test_callback_error_keeps_ticking(self):
        ticks: list[int] = []

        def flaky():
            ticks.append(1)
            raise RuntimeError("boom")

        timer = PeriodicTimer(0.005, flaky)
        timer.start()
        try:
            wait_for_sync(lambda: len(ticks) >= 2)
        finally:
            timer.cancel()

    def test_cancel_from_own_callback(self):
        holder: dict[str, PeriodicTimer] = {}
        ticks: list[int] = []

        def once():
            ticks.append(1)
            holder["t"].cancel()

        holder["t"] = PeriodicTimer(0.005, once)
        holder["t"].start()
        wait_for_sync(lambda: not holder["t"].is_running)
        assert ticks == [1]

    def test_double_start_raises(self):
        timer = PeriodicTimer(10.0, lambda: None)
        timer.start()
        try:
            with pytest.raises(RuntimeError):
                timer.start()
        finally:
            timer.cancel()

    def test_cancel_before_start(self):
        PeriodicTimer(1.0, lambda: None).cancel()
