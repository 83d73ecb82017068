"""SystemManager — startup, main loop and shutdown orchestration."""

from __future__ import annotations

import logging
import signal
import threading
from types import FrameType

from trafficlight.core.event_bus import EventBus
from trafficlight.core.hardware_event_bridge import HardwareEventBridge
from trafficlight.core.input_source import ButtonDebouncer
from trafficlight.core.interfaces.hardware import HardwareFactory
from trafficlight.core.interfaces.transport import Transport
from trafficlight.core.models.config import TrafficLightConfig
from trafficlight.core.reconciler import Reconciler

_log = logging.getLogger(__name__)


class SystemManager:
    """Wires hardware, reconciler, bus and transport together and owns
    their lifetimes.

    Startup order: lamps → reconciler → bootstrap sequence → event bus →
    button bridge → transport.  No event source is live before the
    bootstrap sequence has finished.

    Args:
        config: Validated configuration.
        hardware_factory: Platform-specific hardware factory.
        transport: The transport variant for this deployment.
        event_bus: Optional pre-built bus (a fresh one by default).
    """

    def __init__(
        self,
        config: TrafficLightConfig,
        hardware_factory: HardwareFactory,
        transport: Transport,
        event_bus: EventBus | None = None,
    ) -> None:
        self._config = config
        self._factory = hardware_factory
        self._transport = transport
        self._bus = event_bus or EventBus(queue_size=config.system.event_bus_queue_size)
        self._shutdown = threading.Event()

        # Created during start()
        self._reconciler: Reconciler | None = None
        self._bridge: HardwareEventBridge | None = None

    # ------------------------------------------------------------------
    # Public properties
    # ------------------------------------------------------------------

    @property
    def reconciler(self) -> Reconciler | None:
        """The reconciler (available after ``start()``)."""
        return self._reconciler

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Boot the system."""
        _log.info("SystemManager starting (mode=%s)", self._transport.mode.value)
        system = self._config.system

        # 1. Hardware
        lights = self._factory.create_lights()
        button = self._factory.create_button()

        # 2. Reconciler + lamp test (sequential, nothing else is running yet)
        self._reconciler = Reconciler(
            lights,
            self._transport,
            self._bus,
            bootstrap_step_s=system.bootstrap_step_ms / 1000,
            alert_period_s=system.alert_period_ms / 1000,
        )
        self._reconciler.bootstrap()

        # 3. Event sources
        self._bus.start()
        self._bridge = HardwareEventBridge(
            event_bus=self._bus,
            button=button,
            debouncer=ButtonDebouncer(self._config.hardware.debounce_ms / 1000),
        )
        self._reconciler.start()
        _log.info("SystemManager started")

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run_forever(self, install_signal_handlers: bool = True) -> None:
        """Block until :meth:`request_shutdown` (or SIGINT / SIGTERM), then shut down."""
        if install_signal_handlers:
            signal.signal(signal.SIGINT, self._on_signal)
            signal.signal(signal.SIGTERM, self._on_signal)

        self._shutdown.wait()
        self.shutdown()

    def request_shutdown(self) -> None:
        self._shutdown.set()

    def _on_signal(self, signum: int, _frame: FrameType | None) -> None:
        _log.info("Received %s", signal.Signals(signum).name)
        self.request_shutdown()

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def shutdown(self) -> None:
        """Graceful shutdown: detach inputs → stop reconciler → stop bus → cleanup."""
        _log.info("SystemManager shutting down")

        if self._bridge is not None:
            self._bridge.detach()
            self._bridge = None

        if self._reconciler is not None:
            self._reconciler.stop()

        self._bus.stop()

        self._factory.cleanup()

        _log.info("SystemManager shutdown complete")
