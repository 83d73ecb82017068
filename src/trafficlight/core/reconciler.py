"""Reconciler — single owner of the current light state.

Two independent sources feed it: the button (GPIO thread) and the
transport (network or timer thread).  Both only publish to the
:class:`EventBus`; the bus consumer calls back in here one event at a
time.  The public ``apply_*`` methods additionally hold an ``RLock``, so
direct calls (startup, tests) are serialized with the consumer.

The reconciler is the only writer of the lamps and the only caller of
:meth:`Transport.report`.
"""

from __future__ import annotations

import functools
import logging
import threading
import time
from typing import Any, Callable

from trafficlight.core import events
from trafficlight.core.alert_session import AlertSession
from trafficlight.core.event_bus import EventBus
from trafficlight.core.exceptions import ApplyError, TransportError, UnparseableStateError
from trafficlight.core.interfaces.hardware import LightsInterface
from trafficlight.core.interfaces.transport import CloudTwinInterface, Transport
from trafficlight.core.models.event import ButtonEvent, Event, RemoteUpdate
from trafficlight.core.models.state import (
    CYCLE,
    FAULT_OUTPUTS,
    ControllerSnapshot,
    LightColor,
    Transition,
    TransportMode,
    outputs_for,
)

_log = logging.getLogger(__name__)

#: Fixed startup lamp-test order.
BOOTSTRAP_SEQUENCE = (LightColor.GREEN, LightColor.ORANGE, LightColor.RED)

#: The one desired/reported property the device understands.
DESIRED_KEY = "Light"


class Reconciler:
    """Arbitrates between button presses and remote updates.

    Args:
        lights: The lamps.
        transport: The transport variant selected at startup.
        event_bus: Bus used as the serialization point for all inputs.
        bootstrap_step_s: How long each lamp stays lit during :meth:`bootstrap`.
        alert_period_s: Blink half-period of an alert session.
        sleep: Sleep function used by :meth:`bootstrap` (injectable for tests).
    """

    def __init__(
        self,
        lights: LightsInterface,
        transport: Transport,
        event_bus: EventBus,
        *,
        bootstrap_step_s: float = 1.0,
        alert_period_s: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._lights = lights
        self._transport = transport
        self._bus = event_bus
        self._mode: TransportMode = transport.mode
        self._bootstrap_step = bootstrap_step_s
        self._alert_period = alert_period_s
        self._sleep = sleep

        self._lock = threading.RLock()
        self._state: LightColor | None = None
        self._dead = False
        # Bumped on every (un)subscribe; updates from older subscriptions are dropped.
        self._generation = 0
        self._alert: AlertSession | None = None
        self._alert_seq = 0
        self._last_reported: LightColor | None = None
        self._bus_subscriptions: list[str] = []
        self._started = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def mode(self) -> TransportMode:
        return self._mode

    @property
    def state(self) -> LightColor | None:
        """Current light state (``None`` only before :meth:`bootstrap`)."""
        with self._lock:
            return self._state

    @property
    def is_dead(self) -> bool:
        with self._lock:
            return self._dead

    @property
    def alert_active(self) -> bool:
        with self._lock:
            return self._alert is not None

    def snapshot(self) -> ControllerSnapshot:
        with self._lock:
            return ControllerSnapshot(
                mode=self._mode,
                state=self._state,
                displayed=self._lights.displayed,
                dead=self._dead,
                alert_active=self._alert is not None,
            )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def bootstrap(self) -> None:
        """Light each lamp alone in turn, then settle to Off."""
        with self._lock:
            _log.info("Bootstrap sequence starting")
            for color in BOOTSTRAP_SEQUENCE:
                self._lights.write(outputs_for(color))
                self._sleep(self._bootstrap_step)
            self._set(LightColor.OFF)
            _log.info("Bootstrap sequence complete")

    def start(self) -> None:
        """Wire into the bus and subscribe to the transport."""
        with self._lock:
            if self._started:
                return
            self._started = True
            if self._state is None:
                self._set(LightColor.OFF)

            self._bus_subscriptions = [
                self._bus.subscribe(events.BUTTON_PRESSED, self._on_button_pressed),
                self._bus.subscribe(events.REMOTE_UPDATED, self._on_remote_updated),
                self._bus.subscribe(events.ALERT_REQUESTED, self._on_alert_requested),
                self._bus.subscribe(events.ALERT_TICK, self._on_alert_tick),
            ]

            twin = self._cloud_twin()
            if twin is not None:
                twin.set_alert_handler(lambda: self._bus.publish(events.ALERT_REQUESTED))

            self._subscribe()

            if twin is not None:
                try:
                    self._sync_desired()
                except TransportError as exc:
                    _log.error("Initial desired-state sync failed: %s", exc)
                    self._lights.write(FAULT_OUTPUTS)

            _log.info("Reconciler started (mode=%s, state=%s)", self._mode.value,
                      self._state.value if self._state else None)

    def stop(self) -> None:
        """Cancel any alert, release the transport and detach from the bus."""
        with self._lock:
            if not self._started:
                return
            self._started = False
            self._cancel_alert()
            self._unsubscribe()
            twin = self._cloud_twin()
            if twin is not None:
                twin.set_alert_handler(None)
            for sub_id in self._bus_subscriptions:
                self._bus.unsubscribe(sub_id)
            self._bus_subscriptions = []
            _log.info("Reconciler stopped")

    # ------------------------------------------------------------------
    # Remote updates
    # ------------------------------------------------------------------

    def apply_remote(self, update: RemoteUpdate) -> None:
        """Apply a value proposed by the remote authority.

        Raises:
            UnparseableStateError: If the payload names no light color.
                The fault pattern is displayed and the state is unchanged.
        """
        with self._lock:
            if self._dead:
                _log.debug("Ignoring remote update %r while dead", update.value)
                return

            color = update.color
            if color is None:
                if self._alert is None:
                    self._lights.write(FAULT_OUTPUTS)
                raise UnparseableStateError(update.value, source=update.source)

            if color is not self._state:
                _log.info("Remote update: %s -> %s (%s)",
                          self._state.value if self._state else None, color.value,
                          update.source or "remote")
            self._set(color)

            if self._mode is TransportMode.CLOUD_TWIN and color is not self._last_reported:
                self._report(color)

    # ------------------------------------------------------------------
    # Button
    # ------------------------------------------------------------------

    def apply_button(self, event: ButtonEvent | None = None) -> Transition:
        """Handle one debounced press; semantics depend on the mode."""
        with self._lock:
            previous = self._state or LightColor.OFF
            if self._mode is TransportMode.CLOUD_TWIN:
                current = self._cycle_or_acknowledge()
            else:
                current = self._toggle_dead()
            _log.info("Button: %s -> %s", previous.value, current.value)
            return Transition(previous, current)

    def _toggle_dead(self) -> LightColor:
        if not self._dead:
            self._dead = True
            self._unsubscribe()
            self._set(LightColor.BROKEN)
            self._report(LightColor.BROKEN)
        else:
            self._report(LightColor.GREEN)
            self._dead = False
            self._set(LightColor.GREEN)
            self._subscribe()
        return self._state  # type: ignore[return-value]

    def _cycle_or_acknowledge(self) -> LightColor:
        if self._alert is not None:
            self._cancel_alert()
            try:
                self._sync_desired()
            except TransportError as exc:
                _log.error("Desired-state re-sync after alert failed: %s", exc)
                self._lights.write(FAULT_OUTPUTS)
            return self._state  # type: ignore[return-value]

        new = CYCLE[self._state or LightColor.OFF]
        self._set(new)
        self._report(new)
        return new

    # ------------------------------------------------------------------
    # Alert (cloud twin)
    # ------------------------------------------------------------------

    def start_alert(self) -> None:
        """Begin blinking Orange/Red until the button is pressed."""
        with self._lock:
            if self._mode is not TransportMode.CLOUD_TWIN:
                _log.warning("Alert ignored in %s mode", self._mode.value)
                return
            if self._alert is not None:
                _log.debug("Alert already active")
                return
            self._alert_seq += 1
            session = AlertSession(
                self._alert_seq,
                self._alert_period,
                lambda sid: self._bus.publish(events.ALERT_TICK, {"session": sid}),
            )
            self._alert = session
            self._lights.write(session.next_frame())
            session.start()

    def _cancel_alert(self) -> None:
        if self._alert is not None:
            self._alert.cancel()
            self._alert = None

    # ------------------------------------------------------------------
    # Bus handlers (consumer thread)
    # ------------------------------------------------------------------

    def _on_button_pressed(self, event: Event) -> None:
        self.apply_button(event.payload.get("event"))

    def _on_remote_updated(self, event: Event) -> None:
        update: RemoteUpdate = event.payload["update"]
        with self._lock:
            if event.payload.get("generation") != self._generation:
                _log.debug("Dropping update %r from a closed subscription", update.value)
                return
            try:
                self.apply_remote(update)
            except ApplyError as exc:
                if update.error:
                    _log.warning("Remote unavailable (%s): %s", update.source, update.error)
                else:
                    _log.warning("%s", exc)

    def _on_alert_requested(self, _event: Event) -> None:
        self.start_alert()

    def _on_alert_tick(self, event: Event) -> None:
        with self._lock:
            if self._alert is None or event.payload.get("session") != self._alert.session_id:
                return
            self._lights.write(self._alert.next_frame())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set(self, color: LightColor) -> None:
        self._state = color
        if self._alert is None:
            self._lights.write(outputs_for(color))

    def _report(self, color: LightColor) -> None:
        try:
            self._transport.report(color)
        except TransportError as exc:
            _log.warning("Reporting %s failed: %s", color.value, exc)
            return
        self._last_reported = color

    def _subscribe(self) -> None:
        self._generation += 1
        self._transport.subscribe(functools.partial(self._publish_update, self._generation))

    def _unsubscribe(self) -> None:
        self._generation += 1
        self._transport.unsubscribe()

    def _publish_update(self, generation: int, update: RemoteUpdate) -> None:
        self._bus.publish(events.REMOTE_UPDATED, {"update": update, "generation": generation})

    def _sync_desired(self) -> None:
        twin = self._cloud_twin()
        assert twin is not None
        desired: dict[str, Any] = twin.fetch_desired()
        raw = desired.get(DESIRED_KEY)
        if LightColor.parse(raw) is None:
            _log.info("No usable desired %r (%r) — defaulting to Off", DESIRED_KEY, raw)
            self._set(LightColor.OFF)
            self._report(LightColor.OFF)
            return
        self.apply_remote(RemoteUpdate(value=raw, source=self._mode.value))

    def _cloud_twin(self) -> CloudTwinInterface | None:
        if isinstance(self._transport, CloudTwinInterface):
            return self._transport
        return None
