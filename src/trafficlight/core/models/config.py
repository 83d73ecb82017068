"""Configuration Pydantic models: TrafficLightConfig, HardwareConfig, TransportConfig, SystemConfig."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trafficlight.core.models.state import Output, TransportMode


class HardwareConfig(BaseModel):
    """Pin assignments and hardware parameters.

    All pin numbers are BCM GPIO numbers.  The button is wired to ground
    and read with the internal pull-up, so a press is a falling edge.
    """

    model_config = ConfigDict(extra="forbid")

    light_pins: dict[str, int] = Field(
        default_factory=lambda: {"green": 27, "orange": 18, "red": 4},
        description="GPIO pin per lamp",
    )
    button_pin: int = Field(default=23, description="GPIO pin for the push button")
    debounce_ms: int = Field(default=50, ge=0, description="Button quiet period")

    @field_validator("light_pins")
    @classmethod
    def _one_pin_per_lamp(cls, pins: dict[str, int]) -> dict[str, int]:
        expected = {output.value for output in Output}
        if set(pins) != expected:
            raise ValueError(f"light_pins must name exactly {sorted(expected)}, got {sorted(pins)}")
        if len(set(pins.values())) != len(pins):
            raise ValueError("light_pins must use a distinct pin per lamp")
        return pins


class TransportConfig(BaseModel):
    """Which remote channel drives the light, and how to reach it."""

    model_config = ConfigDict(extra="forbid")

    mode: TransportMode = Field(default=TransportMode.POLLING)
    polling_interval_ms: int = Field(default=500, gt=0, description="Polling period")
    api_base_url: str = Field(
        default="http://localhost:5000/", description="Base URL of the traffic light API"
    )
    request_timeout_s: float = Field(default=10.0, gt=0, description="Per-request network timeout")

    # Push (hub over MQTT)
    push_broker_url: str = Field(default="mqtt://localhost:1883", description="Push broker")
    push_hub: str = Field(default="TrafficLightHub", description="Hub / channel name")
    push_keepalive_s: int = Field(default=60, gt=0)

    # Cloud twin
    connection_string: str = Field(
        default="", description="Device connection string (HostName=…;DeviceId=…;SharedAccessKey=…)"
    )
    use_hardware_credential_store: bool = Field(
        default=False,
        description="Read the connection string from the secure store instead of this file",
    )


class SystemConfig(BaseModel):
    """Non-hardware runtime settings."""

    model_config = ConfigDict(extra="forbid")

    log_level: str = Field(default="INFO", description="Root log level")
    log_dir: str = Field(default="logs", description="Directory for rotating log files")
    dev_mode: bool = Field(default=False, description="Force mock hardware")
    bootstrap_step_ms: int = Field(default=1000, ge=0, description="Startup lamp test per color")
    alert_period_ms: int = Field(default=500, gt=0, description="Alert blink half-period")
    event_bus_queue_size: int = Field(default=100, gt=0, description="Max queued events")


class TrafficLightConfig(BaseModel):
    """Top-level configuration loaded from ``trafficlight_config.json``."""

    model_config = ConfigDict(extra="forbid")

    hardware: HardwareConfig = Field(default_factory=HardwareConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)
