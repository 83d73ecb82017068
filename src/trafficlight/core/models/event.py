"""Pydantic models for event bus messages and inbound events."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from trafficlight.core.models.state import LightColor


class Event(BaseModel):
    """Structured event flowing through the event bus."""

    event_type: str = Field(description="Dot-separated event type, e.g. 'input.button.pressed'")
    payload: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ButtonEvent(BaseModel):
    """One logical (debounced) press of the button."""

    timestamp: float = Field(
        default_factory=time.monotonic, description="Monotonic time of the falling edge"
    )


class RemoteUpdate(BaseModel):
    """A proposed light value received from the remote authority.

    ``value`` is the raw payload; it may not name a :class:`LightColor`.
    Synthetic updates produced on transport failure carry ``value=None``
    and a human-readable ``error``.
    """

    value: str | None = Field(default=None, description="Raw payload as received")
    source: str = Field(default="", description="Transport that produced the update")
    error: str | None = Field(default=None, description="Failure summary, if any")

    @property
    def color(self) -> LightColor | None:
        return LightColor.parse(self.value)

    @classmethod
    def failure(cls, source: str, error: str) -> RemoteUpdate:
        """Build an unparseable update that makes the engine show the fault pattern."""
        return cls(value=None, source=source, error=error)
