"""Azure IoT Hub MQTT device protocol: credentials and topic names.

Pure helpers, no I/O.  The device authenticates with a SAS token derived
from its connection string and talks to the twin and direct methods
through the ``$iothub/…`` topics below.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import re
import time
from dataclasses import dataclass
from urllib.parse import quote_plus

from trafficlight.core.exceptions import ConfigError

API_VERSION = "2021-04-12"
MQTT_PORT = 8883

TWIN_RESPONSE_FILTER = "$iothub/twin/res/#"
TWIN_DESIRED_FILTER = "$iothub/twin/PATCH/properties/desired/#"
METHODS_FILTER = "$iothub/methods/POST/#"

_TWIN_RESPONSE_RE = re.compile(r"^\$iothub/twin/res/(?P<status>\d+)/\?(?P<query>.*)$")
_METHOD_RE = re.compile(r"^\$iothub/methods/POST/(?P<name>[^/]+)/\?(?P<query>.*)$")


@dataclass(frozen=True)
class DeviceCredentials:
    """Parsed ``HostName=…;DeviceId=…;SharedAccessKey=…`` connection string."""

    host_name: str
    device_id: str
    shared_access_key: str

    @classmethod
    def from_connection_string(cls, connection_string: str) -> DeviceCredentials:
        parts: dict[str, str] = {}
        for segment in connection_string.strip().split(";"):
            if not segment:
                continue
            key, sep, value = segment.partition("=")
            if not sep:
                raise ConfigError(f"Malformed connection string segment {key!r}")
            parts[key.strip()] = value.strip()

        missing = [k for k in ("HostName", "DeviceId", "SharedAccessKey") if not parts.get(k)]
        if missing:
            raise ConfigError(f"Connection string lacks {', '.join(missing)}")
        return cls(parts["HostName"], parts["DeviceId"], parts["SharedAccessKey"])

    @property
    def username(self) -> str:
        return f"{self.host_name}/{self.device_id}/?api-version={API_VERSION}"

    @property
    def resource_uri(self) -> str:
        return f"{self.host_name}/devices/{self.device_id}"

    def sas_token(self, ttl_s: int = 3600, now: float | None = None) -> str:
        """Return a ``SharedAccessSignature`` valid for *ttl_s* seconds."""
        expiry = int((time.time() if now is None else now) + ttl_s)
        resource = quote_plus(self.resource_uri)
        try:
            key = base64.b64decode(self.shared_access_key, validate=True)
        except ValueError as exc:
            raise ConfigError("SharedAccessKey is not valid base64") from exc
        to_sign = f"{resource}\n{expiry}".encode("utf-8")
        signature = base64.b64encode(hmac.new(key, to_sign, hashlib.sha256).digest())
        return (
            f"SharedAccessSignature sr={resource}"
            f"&sig={quote_plus(signature.decode('ascii'))}&se={expiry}"
        )


def twin_get_topic(rid: str) -> str:
    return f"$iothub/twin/GET/?$rid={rid}"


def twin_reported_topic(rid: str) -> str:
    return f"$iothub/twin/PATCH/properties/reported/?$rid={rid}"


def method_response_topic(status: int, rid: str) -> str:
    return f"$iothub/methods/res/{status}/?$rid={rid}"


def _query_value(query: str, key: str) -> str | None:
    for pair in query.split("&"):
        k, _, v = pair.partition("=")
        if k == key:
            return v
    return None


def parse_twin_response(topic: str) -> tuple[int, str] | None:
    """Return ``(status, rid)`` for a twin response topic, else ``None``."""
    match = _TWIN_RESPONSE_RE.match(topic)
    if match is None:
        return None
    rid = _query_value(match.group("query"), "$rid")
    if rid is None:
        return None
    return int(match.group("status")), rid


def parse_method_request(topic: str) -> tuple[str, str] | None:
    """Return ``(method_name, rid)`` for a direct-method topic, else ``None``."""
    match = _METHOD_RE.match(topic)
    if match is None:
        return None
    rid = _query_value(match.group("query"), "$rid")
    if rid is None:
        return None
    return match.group("name"), rid


def is_desired_patch(topic: str) -> bool:
    return topic.startswith("$iothub/twin/PATCH/properties/desired/")
