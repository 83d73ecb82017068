"""Configuration: config manager, secure credential store, and JSON defaults."""

from trafficlight.config.config_manager import load_config
from trafficlight.config.secrets_manager import CONNECTION_STRING_KEY, SecretsManager

__all__ = [
	"load_config",
	"CONNECTION_STRING_KEY",
	"SecretsManager",
]
