"""HTTP client for the traffic light API (used by Polling and Push).

``GET  <base>/api/trafficlight``          → bare color name, possibly JSON-quoted
``PUT  <base>/api/trafficlight/<color>``  → report, lower-cased name, empty body
"""

from __future__ import annotations

import logging
from urllib.parse import urljoin

import requests

from trafficlight.core.exceptions import TransportError
from trafficlight.core.models.state import LightColor
from trafficlight.transport.error_utils import summarize_error

_log = logging.getLogger(__name__)

_RESOURCE = "api/trafficlight"


class TrafficLightApi:
    """Thin :mod:`requests` wrapper.  No retries: one call, one request.

    Args:
        base_url: API root, e.g. ``https://host/``.
        timeout: Per-request timeout in seconds.
        session: Optional pre-built :class:`requests.Session`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base = base_url if base_url.endswith("/") else base_url + "/"
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", "trafficlight-client/1.0")

    @property
    def light_url(self) -> str:
        return urljoin(self._base, _RESOURCE)

    def report_url(self, color: LightColor) -> str:
        return urljoin(self._base, f"{_RESOURCE}/{color.value.lower()}")

    def get_light(self) -> str:
        """Return the server's current value with surrounding quotes removed.

        Raises:
            TransportError: On network failure or a non-2xx status.
        """
        url = self.light_url
        try:
            resp = self._session.get(url, timeout=self._timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(summarize_error(exc), endpoint=url) from exc
        return resp.text.replace('"', "").strip()

    def put_light(self, color: LightColor) -> None:
        """Tell the server the light now shows *color*.

        Raises:
            TransportError: On network failure or a non-2xx status.
        """
        url = self.report_url(color)
        try:
            resp = self._session.put(url, timeout=self._timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(summarize_error(exc), endpoint=url) from exc
        _log.debug("Reported %s to %s", color.value, url)

    def close(self) -> None:
        self._session.close()
