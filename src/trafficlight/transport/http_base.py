"""Shared read/report behaviour of the HTTP-backed transports."""

from __future__ import annotations

from trafficlight.core.exceptions import TransportError
from trafficlight.core.interfaces.transport import Transport
from trafficlight.core.models.event import RemoteUpdate
from trafficlight.core.models.state import LightColor
from trafficlight.log_config.logger import ContextualLogger, get_logger
from trafficlight.transport.http_api import TrafficLightApi


class HttpTransportBase(Transport):
    """``fetch_once`` / ``report`` over :class:`TrafficLightApi`.

    A failed fetch is not raised: it becomes a failure :class:`RemoteUpdate`
    so the reconciler shows the fault pattern.
    """

    def __init__(self, api: TrafficLightApi) -> None:
        self._api = api
        self._log = ContextualLogger(get_logger(__name__), transport=self.mode.value)

    def fetch_once(self) -> RemoteUpdate:
        try:
            value = self._api.get_light()
        except TransportError as exc:
            self._log.warning("GET %s failed: %s", exc.endpoint, exc)
            return RemoteUpdate.failure(self.mode.value, str(exc))
        return RemoteUpdate(value=value, source=self.mode.value)

    def report(self, color: LightColor) -> None:
        self._api.put_light(color)
