"""Cloud-twin transport: Azure IoT Hub device twin over MQTT.

* Desired properties carry the wanted color under ``Light``; every
  desired patch that mentions ``Light`` becomes a :class:`RemoteUpdate`.
* Reported properties receive ``{"Light": <color>}`` on :meth:`report`.
* The ``Alert`` direct method invokes the installed alert handler and is
  acknowledged with status 200; any other method gets 404.

Twin reads and reported patches are request/response exchanges keyed by
``$rid``; the caller blocks until the hub answers or the request timeout
expires.
"""

from __future__ import annotations

import itertools
import json
import threading
from dataclasses import dataclass, field
from typing import Any, Callable

import paho.mqtt.client as mqtt

from trafficlight.core.exceptions import TransportConnectError, TransportError
from trafficlight.core.interfaces.transport import CloudTwinInterface, UpdateCallback
from trafficlight.core.models.event import RemoteUpdate
from trafficlight.core.models.state import LightColor
from trafficlight.log_config.logger import ContextualLogger, get_logger
from trafficlight.transport import iothub

DESIRED_KEY = "Light"
ALERT_METHOD = "Alert"


@dataclass
class _TwinWaiter:
    """A pending twin request, resolved by the matching ``$rid`` response."""

    done: threading.Event = field(default_factory=threading.Event)
    status: int = 0
    body: bytes = b""


class CloudTwinTransport(CloudTwinInterface):
    """Device twin + direct methods on one MQTT session.

    Args:
        credentials: Parsed device connection string.
        request_timeout: Seconds to wait for connection and twin responses.
        keepalive: MQTT keep-alive in seconds.
        token_ttl_s: Lifetime of each SAS token (renewed on every connect).
    """

    def __init__(
        self,
        credentials: iothub.DeviceCredentials,
        *,
        request_timeout: float = 10.0,
        keepalive: int = 60,
        token_ttl_s: int = 3600,
    ) -> None:
        self._creds = credentials
        self._timeout = request_timeout
        self._keepalive = keepalive
        self._token_ttl = token_ttl_s
        self._log = ContextualLogger(get_logger(__name__), transport=self.mode.value)

        self._lock = threading.Lock()
        self._client: mqtt.Client | None = None
        self._ready = threading.Event()
        self._on_update: UpdateCallback | None = None
        self._alert_handler: Callable[[], None] | None = None
        self._pending: dict[str, _TwinWaiter] = {}
        self._rids = itertools.count(1)

    @property
    def is_connected(self) -> bool:
        return self._ready.is_set()

    # ------------------------------------------------------------------
    # Transport contract
    # ------------------------------------------------------------------

    def subscribe(self, on_update: UpdateCallback) -> None:
        with self._lock:
            self._on_update = on_update
            self._ensure_client()

    def unsubscribe(self) -> None:
        with self._lock:
            self._on_update = None
            client, self._client = self._client, None
            self._ready.clear()
        if client is None:
            return
        try:
            client.disconnect()
        finally:
            client.loop_stop()
        for waiter in list(self._pending.values()):
            waiter.done.set()
        self._log.info("Twin session closed")

    def fetch_once(self) -> RemoteUpdate:
        try:
            desired = self.fetch_desired()
        except TransportError as exc:
            return RemoteUpdate.failure(self.mode.value, str(exc))
        value = desired.get(DESIRED_KEY)
        return RemoteUpdate(value=value if isinstance(value, str) else None, source=self.mode.value)

    def fetch_desired(self) -> dict[str, Any]:
        status, body = self._request(iothub.twin_get_topic, b"")
        if status != 200:
            raise TransportError(f"Twin GET returned status {status}", endpoint="twin/GET")
        try:
            document = json.loads(body or b"{}")
        except ValueError as exc:
            raise TransportError("Twin document is not JSON", endpoint="twin/GET") from exc
        desired = document.get("desired", {}) if isinstance(document, dict) else {}
        return desired if isinstance(desired, dict) else {}

    def report(self, color: LightColor) -> None:
        payload = json.dumps({DESIRED_KEY: color.value}).encode("utf-8")
        status, _ = self._request(iothub.twin_reported_topic, payload)
        if status not in (200, 204):
            raise TransportError(
                f"Reported patch returned status {status}", endpoint="twin/PATCH/reported",
            )
        self._log.debug("Reported %s", color.value)

    def set_alert_handler(self, callback: Callable[[], None] | None) -> None:
        self._alert_handler = callback

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def _ensure_client(self) -> mqtt.Client:
        if self._client is not None:
            return self._client

        client = mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=self._creds.device_id,
            protocol=mqtt.MQTTv311,
        )
        client.enable_logger(self._log.logger)
        client.tls_set()
        client.reconnect_delay_set(min_delay=1, max_delay=60)
        client.on_pre_connect = self._on_pre_connect
        client.on_connect = self._on_connect
        client.on_subscribe = self._on_subscribe
        client.on_disconnect = self._on_disconnect
        client.on_message = self._on_message
        self._client = client
        self._ready.clear()

        try:
            client.connect_async(self._creds.host_name, iothub.MQTT_PORT, keepalive=self._keepalive)
            client.loop_start()
        except (OSError, ValueError) as exc:
            self._client = None
            raise TransportConnectError(
                f"Cannot start twin session: {exc}", endpoint=self._creds.host_name,
            ) from exc
        self._log.info("Connecting to %s as %s", self._creds.host_name, self._creds.device_id)
        return client

    def _request(self, topic_for: Callable[[str], str], payload: bytes) -> tuple[int, bytes]:
        with self._lock:
            client = self._ensure_client()
        if not self._ready.wait(self._timeout):
            raise TransportConnectError(
                f"Not connected to {self._creds.host_name}", endpoint=self._creds.host_name,
            )

        rid = str(next(self._rids))
        waiter = _TwinWaiter()
        self._pending[rid] = waiter
        topic = topic_for(rid)
        try:
            info = client.publish(topic, payload, qos=0)
            if info.rc != mqtt.MQTT_ERR_SUCCESS:
                raise TransportError(f"Publish failed: {mqtt.error_string(info.rc)}", endpoint=topic)
            if not waiter.done.wait(self._timeout) or waiter.status == 0:
                raise TransportError("No response from hub", endpoint=topic)
            return waiter.status, waiter.body
        finally:
            self._pending.pop(rid, None)

    # ------------------------------------------------------------------
    # paho callbacks (network thread)
    # ------------------------------------------------------------------

    def _on_pre_connect(self, client: mqtt.Client, _userdata: Any) -> None:
        client.username_pw_set(self._creds.username, self._creds.sas_token(self._token_ttl))

    def _on_connect(
        self, client: mqtt.Client, _userdata: Any, _flags: Any, reason_code: Any, _properties: Any,
    ) -> None:
        if reason_code.is_failure:
            self._log.warning("Hub refused connection: %s", reason_code)
            return
        client.subscribe([
            (iothub.TWIN_RESPONSE_FILTER, 0),
            (iothub.TWIN_DESIRED_FILTER, 0),
            (iothub.METHODS_FILTER, 0),
        ])
        self._log.info("Connected to %s", self._creds.host_name)

    def _on_subscribe(
        self, _client: mqtt.Client, _userdata: Any, _mid: int, _reason_codes: Any, _properties: Any,
    ) -> None:
        self._ready.set()

    def _on_disconnect(
        self, _client: mqtt.Client, _userdata: Any, _flags: Any, reason_code: Any, _properties: Any,
    ) -> None:
        self._ready.clear()
        if self._client is not None:
            self._log.warning("Disconnected (%s) — will reconnect", reason_code)

    def _on_message(self, client: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
        topic = msg.topic

        response = iothub.parse_twin_response(topic)
        if response is not None:
            status, rid = response
            waiter = self._pending.get(rid)
            if waiter is not None:
                waiter.status, waiter.body = status, msg.payload
                waiter.done.set()
            return

        if iothub.is_desired_patch(topic):
            self._handle_desired_patch(msg.payload)
            return

        method = iothub.parse_method_request(topic)
        if method is not None:
            self._handle_method(client, *method)
            return

        self._log.debug("Ignoring message on %s", topic)

    def _handle_desired_patch(self, payload: bytes) -> None:
        try:
            patch = json.loads(payload or b"{}")
        except ValueError:
            self._log.warning("Desired patch is not JSON: %r", payload[:80])
            return
        if not isinstance(patch, dict) or DESIRED_KEY not in patch:
            return
        value = patch[DESIRED_KEY]
        if value is None:
            self._log.debug("Desired %s removed — keeping current state", DESIRED_KEY)
            return
        callback = self._on_update
        if callback is not None:
            raw = value if isinstance(value, str) else json.dumps(value)
            callback(RemoteUpdate(value=raw, source=self.mode.value))

    def _handle_method(self, client: mqtt.Client, name: str, rid: str) -> None:
        handler = self._alert_handler
        if name == ALERT_METHOD and handler is not None:
            self._log.info("Alert command received")
            handler()
            status, body = 200, {}
        else:
            self._log.warning("Unknown direct method %s", name)
            status, body = 404, {"message": f"Unknown method {name}"}
        client.publish(iothub.method_response_topic(status, rid), json.dumps(body), qos=0)
