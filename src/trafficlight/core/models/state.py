"""Runtime state models and enumerations."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, Field


class LightColor(str, Enum):
    """Logical state of the traffic light, including the composite ``Broken``."""

    GREEN = "Green"
    ORANGE = "Orange"
    RED = "Red"
    OFF = "Off"
    BROKEN = "Broken"

    @classmethod
    def parse(cls, raw: object) -> LightColor | None:
        """Return the color named by *raw*, or ``None`` if it names none.

        Surrounding whitespace and double quotes are stripped (the HTTP API
        returns a JSON string) and the comparison is case-insensitive.
        """
        if not isinstance(raw, str):
            return None
        name = raw.strip().strip('"').strip().lower()
        for color in cls:
            if color.value.lower() == name:
                return color
        return None


class Output(str, Enum):
    """The three physical lamps."""

    GREEN = "green"
    ORANGE = "orange"
    RED = "red"


class TransportMode(str, Enum):
    """How remote state reaches the device."""

    POLLING = "polling"
    PUSH = "push"
    CLOUD_TWIN = "cloud_twin"


class Edge(str, Enum):
    """Raw button signal edge.  The button is wired active-low."""

    FALLING = "falling"
    RISING = "rising"


_OUTPUTS: dict[LightColor, frozenset[Output]] = {
    LightColor.GREEN: frozenset({Output.GREEN}),
    LightColor.ORANGE: frozenset({Output.ORANGE}),
    LightColor.RED: frozenset({Output.RED}),
    LightColor.OFF: frozenset(),
    LightColor.BROKEN: frozenset({Output.RED, Output.GREEN}),
}

#: Lit when a remote value cannot be understood or the channel is down.
FAULT_OUTPUTS: frozenset[Output] = frozenset({Output.ORANGE, Output.RED})

#: Button cycle used in cloud-twin mode.
CYCLE: dict[LightColor, LightColor] = {
    LightColor.GREEN: LightColor.ORANGE,
    LightColor.ORANGE: LightColor.RED,
    LightColor.RED: LightColor.OFF,
    LightColor.OFF: LightColor.GREEN,
    LightColor.BROKEN: LightColor.OFF,
}


def outputs_for(color: LightColor) -> frozenset[Output]:
    """Return the set of lamps that display *color*."""
    return _OUTPUTS[color]


class Transition(NamedTuple):
    """Result of a button press: state before and after."""

    previous: LightColor
    current: LightColor


class ControllerSnapshot(BaseModel):
    """Read-only view of the reconciler, used for status logging and tests."""

    mode: TransportMode
    state: LightColor | None = Field(default=None)
    displayed: frozenset[Output] = Field(default_factory=frozenset)
    dead: bool = Field(default=False)
    alert_active: bool = Field(default=False)
