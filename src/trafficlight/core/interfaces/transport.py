"""Transport abstraction: how remote state enters and leaves the device.

A single variant is chosen at startup from :class:`TransportMode`; the
reconciler only ever talks to the contract below.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

from trafficlight.core.models.event import RemoteUpdate
from trafficlight.core.models.state import LightColor, TransportMode

UpdateCallback = Callable[[RemoteUpdate], None]


class Transport(ABC):
    """Four-operation contract shared by every transport variant."""

    mode: TransportMode

    @abstractmethod
    def subscribe(self, on_update: UpdateCallback) -> None:
        """Begin delivering :class:`RemoteUpdate` events to *on_update*.

        Delivery happens on a transport-owned thread.
        """

    @abstractmethod
    def fetch_once(self) -> RemoteUpdate:
        """Read the current remote value once."""

    @abstractmethod
    def report(self, color: LightColor) -> None:
        """Push *color* to the remote authority.

        Raises:
            TransportError: If the write fails.  Never retried.
        """

    @abstractmethod
    def unsubscribe(self) -> None:
        """Release the active subscription.  Idempotent.

        Once this returns, the subscription's thread delivers nothing more.
        """


class CloudTwinInterface(Transport):
    """Cloud device twin: structured desired state plus a remote Alert command."""

    mode = TransportMode.CLOUD_TWIN

    @abstractmethod
    def fetch_desired(self) -> dict[str, Any]:
        """Return the desired-property document."""

    @abstractmethod
    def set_alert_handler(self, callback: Callable[[], None] | None) -> None:
        """Install the handler invoked when the ``Alert`` command arrives."""
