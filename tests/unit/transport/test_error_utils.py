"""Tests for trafficlight.transport.error_utils."""

from __future__ import annotations

from unittest.mock import MagicMock

import requests

from trafficlight.transport.error_utils import summarize_error


class TestSummarizeError:
    def test_connect_timeout(self):
        assert summarize_error(requests.exceptions.ConnectTimeout()) == "Connect timeout"

    def test_read_timeout(self):
        assert summarize_error(requests.exceptions.ReadTimeout()) == "Read timeout"

    def test_ssl_error(self):
        assert summarize_error(requests.exceptions.SSLError()) == "TLS/SSL error"

    def test_http_error_with_response(self):
        resp = MagicMock(status_code=404, reason="Not Found")
        err = requests.exceptions.HTTPError(response=resp)
        assert summarize_error(err) == "HTTP 404 Not Found"

    def test_dns_failure(self):
        err = requests.exceptions.ConnectionError("Name or service not known")
        assert summarize_error(err) == "DNS failure"

    def test_connection_refused(self):
        err = requests.exceptions.ConnectionError("[Errno 111] Connection refused")
        assert summarize_error(err) == "Connection refused"

    def test_generic_exception(self):
        assert summarize_error(ValueError("bad value")) == "bad value"

    def test_empty_message_uses_class_name(self):
        assert summarize_error(RuntimeError()) == "RuntimeError"

    def test_truncation(self):
        msg = summarize_error(ValueError("x" * 200), max_len=20)
        assert len(msg) == 20
        assert msg.endswith("...")
