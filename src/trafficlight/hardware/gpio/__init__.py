"""GPIO hardware backend for Raspberry Pi.

Provides :class:`GPIOHardwareFactory` and the individual GPIO component
classes (lights, button).  Needs ``gpiozero`` and ``lgpio`` on the Pi.
"""
