"""Short, log-friendly summaries of network exceptions.

A flapping network should give one readable warning per poll, not a
``requests``/``urllib3`` traceback chain.
"""

from __future__ import annotations

import requests

# Most specific first: ConnectTimeout and SSLError are ConnectionErrors too.
_LABELS: tuple[tuple[type[BaseException], str], ...] = (
    (requests.exceptions.ConnectTimeout, "Connect timeout"),
    (requests.exceptions.ReadTimeout, "Read timeout"),
    (requests.exceptions.Timeout, "Timeout"),
    (requests.exceptions.SSLError, "TLS/SSL error"),
)

# Substring of the underlying socket error -> label.
_CONNECTION_HINTS: tuple[tuple[str, str], ...] = (
    ("Name or service not known", "DNS failure"),
    ("Temporary failure in name resolution", "DNS failure"),
    ("nodename nor servname", "DNS failure"),
    ("Connection refused", "Connection refused"),
    ("Network is unreachable", "Network unreachable"),
    ("Failed to establish", "Connection failed"),
)


def _describe(err: BaseException) -> str:
    for exc_type, label in _LABELS:
        if isinstance(err, exc_type):
            return label

    if isinstance(err, requests.exceptions.HTTPError):
        resp = err.response
        if resp is None:
            return "HTTP error"
        return f"HTTP {resp.status_code} {getattr(resp, 'reason', '') or ''}".strip()

    if isinstance(err, requests.exceptions.ConnectionError):
        text = str(err)
        return next((label for hint, label in _CONNECTION_HINTS if hint in text), "Connection error")

    return str(err) or type(err).__name__


def summarize_error(err: BaseException, max_len: int = 80) -> str:
    """Return at most *max_len* characters describing *err*."""
    msg = _describe(err)
    return msg if len(msg) <= max_len else msg[: max_len - 3] + "..."
