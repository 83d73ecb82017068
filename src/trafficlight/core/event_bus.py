"""Threaded publish/subscribe hub with exactly one dispatching thread.

Producers (gpiozero edge callbacks, the paho network loop, timer threads)
only ever enqueue.  The consumer thread is the sole caller of handlers,
which is what lets the reconciler treat each event as a serialized step.

The queue is bounded.  When it fills up, level-triggered events (remote
updates, alert ticks) are sacrificed first since a newer one supersedes
them; button presses are only dropped if nothing else is queued.  A handler
that raises is logged and keeps its subscription.
"""

from __future__ import annotations

import itertools
import logging
import queue
import threading
from typing import Any, Callable

from trafficlight.core import events
from trafficlight.core.models.event import Event

_log = logging.getLogger(__name__)

_STOP = object()

# Superseded by the next event of the same type.
_EXPENDABLE = frozenset({events.REMOTE_UPDATED, events.ALERT_TICK})

Handler = Callable[[Event], Any]


class EventBus:
    """``queue.Queue`` plus a daemon consumer thread.

    Args:
        queue_size: Pending events kept before overflow handling kicks in.
    """

    def __init__(self, queue_size: int = 100) -> None:
        self._queue_size = queue_size
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=queue_size)
        # event_type -> {sub_id: handler}, insertion ordered
        self._handlers: dict[str, dict[str, Handler]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._consumer: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._consumer is not None and self._consumer.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._consumer = threading.Thread(
            target=self._consume, name="event-bus-consumer", daemon=True,
        )
        self._consumer.start()
        _log.info("Event bus started (queue_size=%d)", self._queue_size)

    def stop(self, timeout: float = 5.0) -> None:
        """Let the consumer finish its current event, then drop all handlers.

        Nothing is dispatched by the consumer once this returns.
        """
        consumer, self._consumer = self._consumer, None
        if consumer is None:
            return
        self._enqueue(_STOP)
        if consumer is not threading.current_thread():
            consumer.join(timeout=timeout)
            if consumer.is_alive():
                _log.warning("Event bus consumer still busy after %.1fs", timeout)
        with self._lock:
            self._handlers.clear()
        _log.info("Event bus stopped")

    def publish(self, event_type: str, payload: dict[str, Any] | None = None) -> None:
        """Queue an event from any thread.  Never blocks."""
        self._enqueue(Event(event_type=event_type, payload=payload or {}))

    def _enqueue(self, item: Any) -> None:
        while True:
            try:
                self._queue.put_nowait(item)
                return
            except queue.Full:
                pass
            victim = self._evict(item)
            if victim is item:
                _log.warning(
                    "Event queue full, discarded incoming %s",
                    getattr(item, "event_type", "stop marker"),
                )
                return
            if victim is not None:
                _log.warning("Event queue full, discarded %s", victim.event_type)

    def _evict(self, incoming: Any) -> Any:
        """Remove and return the queued event to sacrifice for *incoming*.

        Returns *incoming* itself when it is the cheapest thing to lose, or
        ``None`` if the queue drained in the meantime and a retry will fit.
        """
        with self._queue.mutex:
            pending = self._queue.queue
            if not pending:
                return None
            candidates = [e for e in pending if e is not _STOP]
            victim = next((e for e in candidates if e.event_type in _EXPENDABLE), None)
            if victim is None:
                if incoming is not _STOP and incoming.event_type in _EXPENDABLE:
                    return incoming
                if not candidates:
                    return incoming
                victim = candidates[0]
            pending.remove(victim)
            self._queue.not_full.notify()
            return victim

    def subscribe(self, event_type: str, handler: Handler) -> str:
        """Call *handler* for every *event_type* event; returns a subscription id."""
        with self._lock:
            sub_id = f"{event_type}#{next(self._ids)}"
            self._handlers.setdefault(event_type, {})[sub_id] = handler
        return sub_id

    def unsubscribe(self, sub_id: str) -> None:
        """Forget *sub_id*.  Unknown ids are ignored."""
        event_type = sub_id.rpartition("#")[0]
        with self._lock:
            handlers = self._handlers.get(event_type)
            if handlers is not None:
                handlers.pop(sub_id, None)

    def _consume(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            self.dispatch(item)

    def dispatch(self, event: Event) -> None:
        """Run the handlers for *event* on the calling thread."""
        with self._lock:
            targets = list(self._handlers.get(event.event_type, {}).values())
        for handler in targets:
            try:
                handler(event)
            except Exception:
                _log.exception("Handler %r failed on '%s'", handler, event.event_type)
