"""Secure credential store backing ``use_hardware_credential_store``.

The device connection string is kept out of the plain config file.  A
value is looked up in the process environment first, then in a
``KEY=VALUE`` secrets file, which is read once on first use.

Secrets file location, first match wins:

1. the *path* given to :class:`SecretsManager`
2. ``TRAFFICLIGHT_SECRETS_FILE``
3. ``secrets/secrets.env`` relative to the working directory
4. ``/etc/trafficlight/secrets.env``
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable
from pathlib import Path

from trafficlight.core.exceptions import ConfigError

_log = logging.getLogger(__name__)

#: Key under which the device connection string is stored.
CONNECTION_STRING_KEY = "TRAFFICLIGHT_CONNECTION_STRING"

_SECRETS_FILE_ENV = "TRAFFICLIGHT_SECRETS_FILE"
_FALLBACK_FILES = (
    Path("secrets/secrets.env"),
    Path("/etc/trafficlight/secrets.env"),
)


def parse_env_lines(lines: Iterable[str], source: str = "<secrets>") -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines.

    Blank lines and ``#`` comments are skipped, malformed lines are logged
    and skipped, and one layer of surrounding quotes is removed from values.
    Only the first ``=`` separates key from value.
    """
    values: dict[str, str] = {}
    for lineno, raw in enumerate(lines, 1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep or not key.strip():
            _log.warning("Skipping malformed line %d in %s", lineno, source)
            continue
        values[key.strip()] = value.strip().strip("\"'")
    return values


class SecretsManager:
    """Environment-first secret lookup with a lazily read file fallback.

    Args:
        path: Explicit secrets file; overrides the search list.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self._explicit = Path(path) if path is not None else None
        self._lock = threading.Lock()
        self._file_values: dict[str, str] | None = None

    def get(self, key: str, default: str = "") -> str:
        """Return *key* from the environment, else the secrets file, else *default*."""
        if key in os.environ:
            return os.environ[key]
        return self._values().get(key, default)

    def require(self, key: str) -> str:
        """Like :meth:`get`, but an unset or empty value is a :class:`ConfigError`."""
        value = self.get(key)
        if not value:
            raise ConfigError(f"Secret {key} is not set (environment or secrets file)")
        return value

    def keys(self) -> list[str]:
        """Sorted keys defined in the secrets file (environment not included)."""
        return sorted(self._values())

    def _values(self) -> dict[str, str]:
        with self._lock:
            if self._file_values is None:
                self._file_values = self._read()
            return self._file_values

    def _read(self) -> dict[str, str]:
        path = self._locate()
        if path is None:
            _log.debug("No secrets file; environment only")
            return {}
        _log.info("Reading secrets from %s", path)
        with path.open(encoding="utf-8") as handle:
            return parse_env_lines(handle, source=str(path))

    def _locate(self) -> Path | None:
        if self._explicit is not None:
            return self._explicit if self._explicit.is_file() else None

        named = os.environ.get(_SECRETS_FILE_ENV)
        if named:
            candidate = Path(named)
            if not candidate.is_file():
                _log.warning("%s=%s does not exist", _SECRETS_FILE_ENV, named)
                return None
            return candidate

        return next((p for p in _FALLBACK_FILES if p.is_file()), None)
