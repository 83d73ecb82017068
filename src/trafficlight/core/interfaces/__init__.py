"""Hardware and transport abstraction interfaces."""

from trafficlight.core.interfaces.hardware import (
    ButtonInterface,
    HardwareFactory,
    LightsInterface,
)
from trafficlight.core.interfaces.transport import (
    CloudTwinInterface,
    Transport,
    UpdateCallback,
)

__all__ = [
    "ButtonInterface",
    "CloudTwinInterface",
    "HardwareFactory",
    "LightsInterface",
    "Transport",
    "UpdateCallback",
]
