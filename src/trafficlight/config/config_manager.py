"""Config manager: JSON file, then environment overrides, then validation."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from trafficlight.core.models.config import TrafficLightConfig

_log = logging.getLogger(__name__)

#: Shipped defaults, installed as package data next to this module.
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "trafficlight_config.json"

_CONFIG_FILE_ENV = "TRAFFICLIGHT_CONFIG_FILE"

# Environment variable -> (section, field).  Values stay strings; the
# pydantic models coerce them ("1"/"true"/"yes" for booleans, digits for ints).
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "TRAFFICLIGHT_LOG_LEVEL": ("system", "log_level"),
    "TRAFFICLIGHT_DEV_MODE": ("system", "dev_mode"),
    "TRAFFICLIGHT_TRANSPORT_MODE": ("transport", "mode"),
    "TRAFFICLIGHT_POLLING_INTERVAL_MS": ("transport", "polling_interval_ms"),
    "TRAFFICLIGHT_API_URL": ("transport", "api_base_url"),
}


def load_config(config_path: Path | str | None = None) -> TrafficLightConfig:
    """Read, override and validate the configuration.

    Args:
        config_path: Explicit file.  Defaults to ``TRAFFICLIGHT_CONFIG_FILE``,
            then the packaged ``trafficlight_config.json``.

    Raises:
        FileNotFoundError: The chosen file does not exist.
        pydantic.ValidationError: Unknown keys or out-of-range values.
    """
    path = _config_path(config_path)
    _log.info("Loading config from %s", path)
    with path.open(encoding="utf-8") as handle:
        data: dict[str, Any] = json.load(handle)
    _apply_env_overrides(data, os.environ)
    return TrafficLightConfig.model_validate(data)


def _apply_env_overrides(data: dict[str, Any], environ: Mapping[str, str]) -> None:
    for env_key, (section, field) in ENV_OVERRIDES.items():
        if env_key in environ:
            data.setdefault(section, {})[field] = environ[env_key]
            _log.debug("%s overrides %s.%s", env_key, section, field)


def _config_path(config_path: Path | str | None) -> Path:
    chosen = config_path or os.environ.get(_CONFIG_FILE_ENV) or DEFAULT_CONFIG_PATH
    path = Path(chosen)
    if not path.is_file():
        raise FileNotFoundError(
            f"Config file not found: {path} "
            f"(pass --config or set {_CONFIG_FILE_ENV})"
        )
    return path
