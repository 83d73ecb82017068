"""Test helpers — in-memory transports that record every call."""

from __future__ import annotations

from typing import Any, Callable

from trafficlight.core.exceptions import TransportError
from trafficlight.core.interfaces.transport import CloudTwinInterface, Transport, UpdateCallback
from trafficlight.core.models.event import RemoteUpdate
from trafficlight.core.models.state import LightColor, TransportMode


class FakeTransport(Transport):
    """Polling/Push stand-in.  Tests push values with :meth:`emit`."""

    def __init__(self, mode: TransportMode = TransportMode.POLLING) -> None:
        self.mode = mode
        self.callback: UpdateCallback | None = None
        self.subscribe_calls = 0
        self.unsubscribe_calls = 0
        self.reports: list[LightColor] = []
        self.fail_reports = False
        self.current = "Off"

    @property
    def subscribed(self) -> bool:
        return self.callback is not None

    def subscribe(self, on_update: UpdateCallback) -> None:
        self.subscribe_calls += 1
        self.callback = on_update

    def unsubscribe(self) -> None:
        self.unsubscribe_calls += 1
        self.callback = None

    def fetch_once(self) -> RemoteUpdate:
        return RemoteUpdate(value=self.current, source=self.mode.value)

    def report(self, color: LightColor) -> None:
        if self.fail_reports:
            raise TransportError("report refused", endpoint="fake")
        self.reports.append(color)

    def emit(self, value: str | None, error: str | None = None) -> None:
        """Deliver an update as the transport thread would."""
        if self.callback is None:
            raise AssertionError("emit() while not subscribed")
        self.callback(RemoteUpdate(value=value, source=self.mode.value, error=error))


class FakeCloudTwin(FakeTransport, CloudTwinInterface):
    """Cloud twin stand-in with a settable desired document."""

    def __init__(self, desired: dict[str, Any] | None = None) -> None:
        super().__init__(TransportMode.CLOUD_TWIN)
        self.desired: dict[str, Any] = dict(desired or {})
        self.fetch_desired_calls = 0
        self.fail_fetch = False
        self.alert_handler: Callable[[], None] | None = None

    def fetch_desired(self) -> dict[str, Any]:
        self.fetch_desired_calls += 1
        if self.fail_fetch:
            raise TransportError("twin unreachable", endpoint="fake")
        return dict(self.desired)

    def set_alert_handler(self, callback: Callable[[], None] | None) -> None:
        self.alert_handler = callback

    def trigger_alert(self) -> None:
        if self.alert_handler is None:
            raise AssertionError("no alert handler installed")
        self.alert_handler()
