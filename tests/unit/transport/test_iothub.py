"""Tests for the IoT Hub protocol helpers (no network)."""

from __future__ import annotations

import base64
import hashlib
import hmac
from urllib.parse import parse_qs, quote_plus

import pytest

from trafficlight.core.exceptions import ConfigError
from trafficlight.transport import iothub
from trafficlight.transport.iothub import DeviceCredentials

KEY = "c2VjcmV0LWtleQ=="  # base64("secret-key")
CONN = f"HostName=hub.azure-devices.net;DeviceId=light-01;SharedAccessKey={KEY}"


class TestDeviceCredentials:
    def test_parse(self):
        creds = DeviceCredentials.from_connection_string(CONN)
        assert creds.host_name == "hub.azure-devices.net"
        assert creds.device_id == "light-01"
        assert creds.shared_access_key == KEY

    def test_order_and_trailing_semicolon_ignored(self):
        creds = DeviceCredentials.from_connection_string(
            f"SharedAccessKey={KEY};DeviceId=d;HostName=h;"
        )
        assert (creds.host_name, creds.device_id) == ("h", "d")

    @pytest.mark.parametrize(
        "conn",
        [
            "",
            "HostName=h;DeviceId=d",
            "HostName=h;DeviceId=;SharedAccessKey=k",
            "garbage",
        ],
    )
    def test_malformed_rejected(self, conn):
        with pytest.raises(ConfigError):
            DeviceCredentials.from_connection_string(conn)

    def test_username(self):
        creds = DeviceCredentials.from_connection_string(CONN)
        assert creds.username == (
            f"hub.azure-devices.net/light-01/?api-version={iothub.API_VERSION}"
        )

    def test_sas_token(self):
        creds = DeviceCredentials.from_connection_string(CONN)
        token = creds.sas_token(ttl_s=60, now=1_000_000)

        assert token.startswith("SharedAccessSignature ")
        fields = parse_qs(token.split(" ", 1)[1])
        assert fields["sr"] == ["hub.azure-devices.net/devices/light-01"]
        assert fields["se"] == ["1000060"]

        resource = quote_plus("hub.azure-devices.net/devices/light-01")
        expected = base64.b64encode(
            hmac.new(b"secret-key", f"{resource}\n1000060".encode(), hashlib.sha256).digest()
        ).decode()
        assert fields["sig"] == [expected]

    def test_bad_key_rejected(self):
        creds = DeviceCredentials("h", "d", "not base64!")
        with pytest.raises(ConfigError):
            creds.sas_token()


class TestTopics:
    def test_request_topics(self):
        assert iothub.twin_get_topic("7") == "$iothub/twin/GET/?$rid=7"
        assert iothub.twin_reported_topic("8") == (
            "$iothub/twin/PATCH/properties/reported/?$rid=8"
        )
        assert iothub.method_response_topic(200, "abc") == "$iothub/methods/res/200/?$rid=abc"

    def test_parse_twin_response(self):
        assert iothub.parse_twin_response("$iothub/twin/res/200/?$rid=3") == (200, "3")
        assert iothub.parse_twin_response("$iothub/twin/res/204/?$rid=4&$version=9") == (204, "4")
        assert iothub.parse_twin_response("$iothub/twin/res/200/?$version=9") is None
        assert iothub.parse_twin_response("$iothub/methods/POST/Alert/?$rid=1") is None

    def test_parse_method_request(self):
        assert iothub.parse_method_request("$iothub/methods/POST/Alert/?$rid=42") == ("Alert", "42")
        assert iothub.parse_method_request("$iothub/twin/res/200/?$rid=3") is None

    def test_desired_patch(self):
        assert iothub.is_desired_patch("$iothub/twin/PATCH/properties/desired/?$version=5")
        assert not iothub.is_desired_patch("$iothub/twin/PATCH/properties/reported/?$rid=1")
