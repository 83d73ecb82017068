"""Test helpers — wait utilities for threaded tests."""

from __future__ import annotations

import time
from typing import Callable


def wait_for_sync(
    condition: Callable[[], bool],
    timeout: float = 5.0,
    interval: float = 0.01,
) -> None:
    """Poll *condition* every *interval* seconds.

    Raises :class:`TimeoutError` if *condition* doesn't become truthy
    within *timeout* seconds.
    """
    deadline = time.monotonic() + timeout
    while not condition():
        if time.monotonic() >= deadline:
            raise TimeoutError(
                f"Condition not met within {timeout}s"
            )
        time.sleep(interval)
