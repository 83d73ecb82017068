"""Alert blink session (cloud-twin mode).

While active, the lamps alternate between Orange and Red.  The session's
timer does not touch the hardware itself: each tick is handed to
*on_tick* with the session id, and the reconciler writes the next frame
on its own thread.  A tick carrying the id of a cancelled session is
simply ignored by the reconciler.
"""

from __future__ import annotations

import itertools
import logging
from typing import Callable

from trafficlight.core.models.state import LightColor, Output, outputs_for
from trafficlight.core.periodic_timer import PeriodicTimer

_log = logging.getLogger(__name__)

_FRAMES = (LightColor.ORANGE, LightColor.RED)


class AlertSession:
    """One blink sequence, from the Alert command to its cancellation.

    Args:
        session_id: Unique id, carried by every tick.
        period_s: Time each frame stays lit.
        on_tick: Called from the timer thread with *session_id*.
    """

    def __init__(
        self,
        session_id: int,
        period_s: float,
        on_tick: Callable[[int], None],
    ) -> None:
        self.session_id = session_id
        self._frames = itertools.cycle(_FRAMES)
        self._timer = PeriodicTimer(
            period_s, lambda: on_tick(session_id), name=f"alert-{session_id}",
        )
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        self._active = True
        self._timer.start()
        _log.info("Alert session %d started", self.session_id)

    def next_frame(self) -> frozenset[Output]:
        """Return the lamps for the next blink frame (Orange first)."""
        return outputs_for(next(self._frames))

    def cancel(self) -> None:
        """Stop blinking.  The timer thread has exited when this returns."""
        if not self._active:
            return
        self._active = False
        self._timer.cancel()
        _log.info("Alert session %d cancelled", self.session_id)
