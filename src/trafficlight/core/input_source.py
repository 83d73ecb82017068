"""Button debouncing: raw edges in, one :class:`ButtonEvent` per press out."""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Iterator
from typing import Callable

from trafficlight.core.models.event import ButtonEvent
from trafficlight.core.models.state import Edge

_log = logging.getLogger(__name__)


class ButtonDebouncer:
    """Software debounce for an active-low push button.

    An edge arriving less than *quiet_period_s* after the previously
    accepted edge is contact bounce and is discarded.  Only accepted
    falling edges (the button going down) produce a :class:`ButtonEvent`.

    Args:
        quiet_period_s: Minimum settle time between accepted edges.
        clock: Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        quiet_period_s: float = 0.05,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._quiet = quiet_period_s
        self._clock = clock
        self._last_edge: float | None = None
        self._listeners: list[Callable[[ButtonEvent], None]] = []
        self._lock = threading.Lock()

    def register_listener(self, listener: Callable[[ButtonEvent], None]) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unregister_listener(self, listener: Callable[[ButtonEvent], None]) -> None:
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

    def on_edge(self, edge: Edge) -> ButtonEvent | None:
        """Feed one raw edge.  Returns the emitted event, if any."""
        now = self._clock()
        with self._lock:
            if self._last_edge is not None and now - self._last_edge < self._quiet:
                _log.debug("Edge %s discarded (bounce, %.1f ms)", edge.value,
                           (now - self._last_edge) * 1000)
                return None
            self._last_edge = now
            if edge is not Edge.FALLING:
                return None
            listeners = list(self._listeners)

        event = ButtonEvent(timestamp=now)
        for listener in listeners:
            listener(event)
        return event

    def events(self) -> PressStream:
        """Lazily yield every press from now on.

        Each call returns an independent, unbounded iterator that buffers
        presses from the moment of the call.  Close it (or use it as a
        context manager) to detach it from the debouncer.
        """
        return PressStream(self)


class PressStream(Iterator[ButtonEvent]):
    """Blocking iterator over the presses seen by one :class:`ButtonDebouncer`.

    The listener is registered on construction and removed by :meth:`close`,
    whether or not the stream was ever iterated.
    """

    def __init__(self, debouncer: ButtonDebouncer) -> None:
        self._debouncer = debouncer
        self._inbox: queue.Queue[ButtonEvent] = queue.Queue()
        self._closed = False
        debouncer.register_listener(self._inbox.put)

    def __next__(self) -> ButtonEvent:
        if self._closed:
            raise StopIteration
        return self._inbox.get()

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._debouncer.unregister_listener(self._inbox.put)

    def __enter__(self) -> PressStream:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()
