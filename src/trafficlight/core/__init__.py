"""Core services: event bus, reconciler, input debouncing, system orchestration."""

from trafficlight.core.event_bus import EventBus
from trafficlight.core.hardware_event_bridge import HardwareEventBridge
from trafficlight.core.input_source import ButtonDebouncer
from trafficlight.core.reconciler import Reconciler
from trafficlight.core.system_manager import SystemManager

__all__ = [
    "ButtonDebouncer",
    "EventBus",
    "HardwareEventBridge",
    "Reconciler",
    "SystemManager",
]
