"""Mock hardware implementations for development and testing.

Each class implements the corresponding ABC from
:mod:`trafficlight.core.interfaces.hardware` with in-memory state and
``simulate_*()`` helpers for tests.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Callable

from trafficlight.core.interfaces.hardware import ButtonInterface, LightsInterface
from trafficlight.core.models.state import Edge, Output

_log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lights
# ---------------------------------------------------------------------------

class MockLights(LightsInterface):
    """In-memory lamps.

    Attributes:
        history: Every set passed to :meth:`write`, in order.
    """

    def __init__(self) -> None:
        self._displayed: frozenset[Output] = frozenset()
        self._lock = threading.Lock()
        self.history: list[frozenset[Output]] = []

    def write(self, outputs: Iterable[Output]) -> None:
        lit = frozenset(outputs)
        with self._lock:
            self._displayed = lit
            self.history.append(lit)
        _log.debug("MockLights: %s", sorted(o.value for o in lit) or "all off")

    @property
    def displayed(self) -> frozenset[Output]:
        with self._lock:
            return self._displayed

    def is_lit(self, output: Output) -> bool:
        return output in self.displayed


# ---------------------------------------------------------------------------
# Button
# ---------------------------------------------------------------------------

class MockButton(ButtonInterface):
    """In-memory button with edge and press simulation."""

    def __init__(self) -> None:
        self._callback: Callable[[Edge], None] | None = None

    def register_edge_callback(self, callback: Callable[[Edge], None]) -> None:
        self._callback = callback

    # -- Simulation helpers --

    def simulate_edge(self, edge: Edge) -> None:
        """Deliver one raw *edge* to the registered callback."""
        if self._callback:
            self._callback(edge)
        else:
            _log.debug("No edge callback registered")

    def simulate_press(self) -> None:
        """A clean press: falling edge only (release edges are never significant)."""
        self.simulate_edge(Edge.FALLING)
