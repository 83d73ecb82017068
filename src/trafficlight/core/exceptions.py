"""Exception hierarchy for the traffic light client."""

from __future__ import annotations


class TrafficLightError(Exception):
    """Base exception for all traffic light errors."""


class ConfigError(TrafficLightError):
    """Invalid or missing configuration (e.g. a malformed connection string)."""


class ApplyError(TrafficLightError):
    """A remote update could not be applied."""


class UnparseableStateError(ApplyError):
    """The remote payload does not name a light color."""

    def __init__(self, raw: object, *, source: str = "") -> None:
        self.raw = raw
        self.source = source
        super().__init__(f"Unparseable light value {raw!r} from {source or 'remote'}")


class TransportError(TrafficLightError):
    """Network or channel failure talking to the remote authority."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class TransportConnectError(TransportError):
    """The remote channel could not be established."""
