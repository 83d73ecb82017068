"""HardwareEventBridge — wires the button to the event bus.

Raw edges from the button (GPIO callback thread) go through the
:class:`ButtonDebouncer`; each accepted press is published as
``input.button.pressed``.
"""

from __future__ import annotations

import logging as _logging

from trafficlight.core import events
from trafficlight.core.event_bus import EventBus
from trafficlight.core.input_source import ButtonDebouncer
from trafficlight.core.interfaces.hardware import ButtonInterface
from trafficlight.core.models.event import ButtonEvent

_log = _logging.getLogger(__name__)


class HardwareEventBridge:
    """Translates raw hardware callbacks into event-bus messages.

    Args:
        event_bus: The global event bus.
        button: Button interface delivering raw edges.
        debouncer: Debouncer applied to every edge.
    """

    def __init__(
        self,
        event_bus: EventBus,
        button: ButtonInterface,
        debouncer: ButtonDebouncer,
    ) -> None:
        self._bus = event_bus
        self._debouncer = debouncer

        debouncer.register_listener(self._on_button_pressed)
        button.register_edge_callback(debouncer.on_edge)

    def detach(self) -> None:
        """Stop forwarding presses to the bus."""
        self._debouncer.unregister_listener(self._on_button_pressed)

    # ------------------------------------------------------------------
    # Hardware callbacks (may be called from GPIO threads)
    # ------------------------------------------------------------------

    def _on_button_pressed(self, event: ButtonEvent) -> None:
        _log.debug("Button pressed at %.3f", event.timestamp)
        self._bus.publish(events.BUTTON_PRESSED, {"event": event})
