"""Hardware abstraction interfaces (ABCs).

Every hardware component has a matching abstract base class here.  The GPIO
and Mock backends both implement these interfaces, ensuring parity between
production and development / test environments.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Callable

from trafficlight.core.models.state import Edge, Output


# ---------------------------------------------------------------------------
# Lights
# ---------------------------------------------------------------------------

class LightsInterface(ABC):
    """The three lamps of the traffic light (green, orange, red).

    Composite displays are always written in one call: every lamp in
    *outputs* is driven high, every other lamp low.
    """

    @abstractmethod
    def write(self, outputs: Iterable[Output]) -> None:
        """Light exactly the lamps in *outputs*."""

    @property
    @abstractmethod
    def displayed(self) -> frozenset[Output]:
        """The set of lamps lit by the last :meth:`write`."""


# ---------------------------------------------------------------------------
# Button
# ---------------------------------------------------------------------------

class ButtonInterface(ABC):
    """Single push button delivering raw (undebounced) edges."""

    @abstractmethod
    def register_edge_callback(self, callback: Callable[[Edge], None]) -> None:
        """Register *callback(edge)* to fire on every signal edge."""


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

class HardwareFactory(ABC):
    """Creates all hardware interface implementations for the current platform."""

    @abstractmethod
    def create_lights(self) -> LightsInterface: ...

    @abstractmethod
    def create_button(self) -> ButtonInterface: ...

    def cleanup(self) -> None:
        """Release hardware resources.  No-op by default (mock)."""
