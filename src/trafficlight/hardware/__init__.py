"""Hardware abstraction: factory + platform backends (gpio, mock)."""

from trafficlight.hardware.factory import create_hardware_factory

__all__ = ["create_hardware_factory"]
