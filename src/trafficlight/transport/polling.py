"""Polling transport: GET the API on a fixed period.

Level-triggered: every tick is forwarded, changed or not.  The first
tick happens one interval after :meth:`subscribe`.
"""

from __future__ import annotations

import threading

from trafficlight.core.interfaces.transport import UpdateCallback
from trafficlight.core.models.state import TransportMode
from trafficlight.core.periodic_timer import PeriodicTimer
from trafficlight.transport.http_api import TrafficLightApi
from trafficlight.transport.http_base import HttpTransportBase


class PollingTransport(HttpTransportBase):
    """Periodic HTTP polling.

    Args:
        api: HTTP client.
        interval_s: Polling period in seconds.
    """

    mode = TransportMode.POLLING

    def __init__(self, api: TrafficLightApi, interval_s: float) -> None:
        super().__init__(api)
        self._interval = interval_s
        self._timer: PeriodicTimer | None = None
        self._lock = threading.Lock()

    @property
    def is_subscribed(self) -> bool:
        return self._timer is not None

    def subscribe(self, on_update: UpdateCallback) -> None:
        with self._lock:
            if self._timer is not None:
                self._log.warning("Already polling — restarting timer")
                self._timer.cancel()
            self._timer = PeriodicTimer(
                self._interval,
                lambda: on_update(self.fetch_once()),
                name="poll-timer",
            )
            self._timer.start()
        self._log.info("Polling %s every %.0f ms", self._api.light_url, self._interval * 1000)

    def unsubscribe(self) -> None:
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
            self._log.info("Polling stopped")
