"""Pydantic models for configuration, events, and light state."""
from trafficlight.core.models.config import (
    HardwareConfig,
    SystemConfig,
    TrafficLightConfig,
    TransportConfig,
)
from trafficlight.core.models.event import ButtonEvent, Event, RemoteUpdate
from trafficlight.core.models.state import (
    CYCLE,
    FAULT_OUTPUTS,
    ControllerSnapshot,
    Edge,
    LightColor,
    Output,
    Transition,
    TransportMode,
    outputs_for,
)

__all__ = [
    "TrafficLightConfig",
    "HardwareConfig",
    "SystemConfig",
    "TransportConfig",
    "ButtonEvent",
    "Event",
    "RemoteUpdate",
    "CYCLE",
    "FAULT_OUTPUTS",
    "ControllerSnapshot",
    "Edge",
    "LightColor",
    "Output",
    "Transition",
    "TransportMode",
    "outputs_for",
]
