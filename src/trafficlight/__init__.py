"""Traffic light client: remote-driven traffic light on a Raspberry Pi."""

__version__ = "1.0.0"
