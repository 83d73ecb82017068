"""Push transport: the server pushes ``UpdateLight`` on a hub channel.

The hub is carried over MQTT: the ``UpdateLight`` event of hub
``TrafficLightHub`` is the topic ``TrafficLightHub/UpdateLight`` and its
payload is one color name.  On subscribe the current value is read once
over HTTP, then the broker session is opened.  Reconnection after a
dropped session is paho's job (``reconnect_delay_set``).

Reports go over HTTP, exactly like the polling transport.
"""

from __future__ import annotations

import threading
import uuid
from typing import Any

import paho.mqtt.client as mqtt

from trafficlight.core.interfaces.transport import UpdateCallback
from trafficlight.core.models.event import RemoteUpdate
from trafficlight.core.models.state import TransportMode
from trafficlight.transport.http_api import TrafficLightApi
from trafficlight.transport.http_base import HttpTransportBase

UPDATE_EVENT = "UpdateLight"


def parse_broker_url(url: str) -> tuple[str, int, bool]:
    """Split ``mqtt[s]://host[:port]`` into ``(host, port, use_tls)``."""
    value = url.strip()
    if not value:
        raise ValueError("Broker URL is empty")

    scheme = "mqtt"
    if "://" in value:
        scheme, value = value.split("://", 1)
    if "/" in value:
        value = value.split("/", 1)[0]
    use_tls = scheme.lower() in ("mqtts", "ssl", "tls")
    default_port = 8883 if use_tls else 1883

    host, _, maybe_port = value.rpartition(":")
    if host and maybe_port.isdigit():
        return host, int(maybe_port), use_tls
    return value, default_port, use_tls


class PushTransport(HttpTransportBase):
    """Hub subscription over MQTT with an initial HTTP read.

    Args:
        api: HTTP client (initial read and reports).
        broker_url: ``mqtt://host:port`` or ``mqtts://host:port``.
        hub: Hub name; the event topic is ``<hub>/UpdateLight``.
        keepalive: MQTT keep-alive in seconds.
    """

    mode = TransportMode.PUSH

    def __init__(
        self,
        api: TrafficLightApi,
        broker_url: str,
        hub: str = "TrafficLightHub",
        keepalive: int = 60,
    ) -> None:
        super().__init__(api)
        self._host, self._port, self._tls = parse_broker_url(broker_url)
        self._topic = f"{hub.strip('/')}/{UPDATE_EVENT}"
        self._keepalive = keepalive
        self._lock = threading.Lock()
        self._client: mqtt.Client | None = None
        self._on_update: UpdateCallback | None = None
        self._ever_connected = False
        self._fault_surfaced = False

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def is_subscribed(self) -> bool:
        return self._client is not None

    # ------------------------------------------------------------------
    # Transport contract
    # ------------------------------------------------------------------

    def subscribe(self, on_update: UpdateCallback) -> None:
        with self._lock:
            self._stop_client()
            self._on_update = on_update
            self._ever_connected = False
            self._fault_surfaced = False

            on_update(self.fetch_once())

            client = mqtt.Client(
                callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
                client_id=f"trafficlight-{uuid.uuid4().hex[:8]}",
                protocol=mqtt.MQTTv311,
            )
            client.enable_logger(self._log.logger)
            if self._tls:
                client.tls_set()
            client.reconnect_delay_set(min_delay=1, max_delay=30)
            client.on_connect = self._on_connect
            client.on_connect_fail = self._on_connect_fail
            client.on_disconnect = self._on_disconnect
            client.on_message = self._on_message
            self._client = client

            try:
                client.connect_async(self._host, self._port, keepalive=self._keepalive)
                client.loop_start()
            except (OSError, ValueError) as exc:
                self._surface_connect_failure(f"cannot start session: {exc}")
                return
            self._log.info("Connecting to %s:%d for %s", self._host, self._port, self._topic)

    def unsubscribe(self) -> None:
        with self._lock:
            self._stop_client()

    # ------------------------------------------------------------------
    # paho callbacks (network thread)
    # ------------------------------------------------------------------

    def _on_connect(
        self, client: mqtt.Client, _userdata: Any, _flags: Any, reason_code: Any, _properties: Any,
    ) -> None:
        if reason_code.is_failure:
            self._log.warning("Broker refused connection: %s", reason_code)
            self._surface_connect_failure(str(reason_code))
            return
        self._ever_connected = True
        client.subscribe(self._topic, qos=1)
        self._log.info("Connected, subscribed to %s", self._topic)

    def _on_connect_fail(self, _client: mqtt.Client, _userdata: Any) -> None:
        self._log.warning("Connection to %s:%d failed", self._host, self._port)
        self._surface_connect_failure("connection failed")

    def _on_disconnect(
        self, _client: mqtt.Client, _userdata: Any, _flags: Any, reason_code: Any, _properties: Any,
    ) -> None:
        if self._client is not None:
            self._log.warning("Disconnected (%s) — will reconnect", reason_code)

    def _on_message(self, _client: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
        callback = self._on_update
        if callback is None or msg.topic != self._topic:
            return
        value = msg.payload.decode("utf-8", errors="replace")
        self._log.debug("%s: %r", UPDATE_EVENT, value)
        callback(RemoteUpdate(value=value, source=self.mode.value))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _surface_connect_failure(self, reason: str) -> None:
        """Forward one fault update if the session never came up."""
        callback = self._on_update
        if self._ever_connected or self._fault_surfaced or callback is None:
            return
        self._fault_surfaced = True
        callback(RemoteUpdate.failure(self.mode.value, f"push connect failed: {reason}"))

    def _stop_client(self) -> None:
        client, self._client = self._client, None
        self._on_update = None
        if client is None:
            return
        try:
            client.disconnect()
        finally:
            client.loop_stop()
        self._log.info("Push session closed")
