"""Tests for scripts/watch_light.py."""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from trafficlight.core.exceptions import TransportError

_SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "watch_light.py"


@pytest.fixture(scope="module")
def watch_light():
    spec = importlib.util.spec_from_file_location("watch_light", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    sys.modules["watch_light"] = module
    spec.loader.exec_module(module)
    yield module
    sys.modules.pop("watch_light", None)


class TestDescribe:
    def test_known_color(self, watch_light):
        assert "Green" in watch_light.describe("Green")

    def test_unknown_value_flagged(self, watch_light):
        out = watch_light.describe("Blue")
        assert "[FAULT]" in out
        assert "'Blue'" in out


class TestWatch:
    def test_count_limits_polls(self, watch_light, monkeypatch, capsys):
        monkeypatch.setattr(watch_light.time, "sleep", lambda _s: None)
        api = MagicMock()
        api.get_light.side_effect = ["Red", "Green"]

        assert watch_light.watch(api, 0.5, count=2) is True

        out = capsys.readouterr().out
        assert "Red" in out
        assert "Green" in out
        assert api.get_light.call_count == 2

    def test_all_failures(self, watch_light, monkeypatch, capsys):
        monkeypatch.setattr(watch_light.time, "sleep", lambda _s: None)
        api = MagicMock()
        api.get_light.side_effect = TransportError("Connection refused", endpoint="x")

        assert watch_light.watch(api, 0.5, count=3) is False
        assert capsys.readouterr().out.count("[FAIL]") == 3
