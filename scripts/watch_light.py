#!/usr/bin/env python3
"""Watch the traffic light API from a terminal — no hardware needed.

Usage:
    python scripts/watch_light.py [--url URL] [--interval-ms N] [--count N]

Polls ``<url>/api/trafficlight`` every interval and prints what the light
would show.  Useful to check the server side before deploying to the Pi.

Exit code: 0 on Ctrl-C or after ``--count`` polls, 1 if every poll failed.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

# Resolve project root (script lives in scripts/, project root is parent)
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"

# Ensure src/ is on sys.path so trafficlight.* imports work
sys.path.insert(0, str(SRC_DIR))

from trafficlight.config.config_manager import load_config  # noqa: E402
from trafficlight.core.exceptions import TransportError  # noqa: E402
from trafficlight.core.models.state import LightColor  # noqa: E402
from trafficlight.transport.http_api import TrafficLightApi  # noqa: E402

# ---------------------------------------------------------------------------
# Colour helpers (ANSI)
# ---------------------------------------------------------------------------
_GREEN = "\033[92m"
_RED = "\033[91m"
_YELLOW = "\033[93m"
_BOLD = "\033[1m"
_RESET = "\033[0m"

_STYLE: dict[LightColor, str] = {
    LightColor.GREEN: _GREEN,
    LightColor.ORANGE: _YELLOW,
    LightColor.RED: _RED,
    LightColor.OFF: "",
    LightColor.BROKEN: _RED + _BOLD,
}


def describe(value: str) -> str:
    """Return a one-line, colourised description of a raw API value."""
    color = LightColor.parse(value)
    if color is None:
        return f"{_YELLOW}[FAULT]{_RESET} unrecognised value {value!r}"
    return f"{_STYLE[color]}{color.value}{_RESET}"


def watch(api: TrafficLightApi, interval_s: float, count: int | None) -> bool:
    """Poll until interrupted or *count* polls.  Returns True if any poll succeeded."""
    any_ok = False
    polls = 0
    while count is None or polls < count:
        polls += 1
        stamp = time.strftime("%H:%M:%S")
        try:
            print(f"{stamp}  {describe(api.get_light())}")
            any_ok = True
        except TransportError as exc:
            print(f"{stamp}  {_RED}[FAIL]{_RESET} {exc}")
        if count is None or polls < count:
            time.sleep(interval_s)
    return any_ok


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--url", help="API base URL (default: from config)")
    parser.add_argument("--interval-ms", type=int, help="Polling period (default: from config)")
    parser.add_argument("--count", type=int, help="Stop after N polls")
    args = parser.parse_args()

    config = load_config()
    url = args.url or config.transport.api_base_url
    interval_ms = args.interval_ms or config.transport.polling_interval_ms

    print(f"{_BOLD}Watching {url} every {interval_ms} ms{_RESET}")
    api = TrafficLightApi(url, timeout=config.transport.request_timeout_s)
    try:
        ok = watch(api, interval_ms / 1000, args.count)
    except KeyboardInterrupt:
        return 0
    finally:
        api.close()
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
