"""Cancellable periodic timer running on a daemon thread.

Used by the polling transport and the alert blink.  :meth:`cancel` is
synchronous: once it returns, the callback will not run again.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

_log = logging.getLogger(__name__)


class PeriodicTimer:
    """Call *callback* every *interval_s* seconds until cancelled.

    Args:
        interval_s: Period between ticks.
        callback: Zero-arg callable; exceptions are logged, not raised.
        name: Thread name (shows up in logs).

    The first tick happens one interval after :meth:`start`.
    """

    def __init__(
        self,
        interval_s: float,
        callback: Callable[[], None],
        *,
        name: str = "periodic-timer",
    ) -> None:
        self._interval = interval_s
        self._callback = callback
        self._name = name
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError(f"Timer {self._name} already started")
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        """Stop ticking and wait for an in-flight tick to finish."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            self._tick()

    def _tick(self) -> None:
        if self._stop_event.is_set():
            return
        try:
            self._callback()
        except Exception:
            _log.exception("Timer %s callback raised", self._name)
