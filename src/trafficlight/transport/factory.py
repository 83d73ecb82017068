"""Transport factory — picks the variant named by ``transport.mode``."""

from __future__ import annotations

import logging

from trafficlight.config.secrets_manager import CONNECTION_STRING_KEY, SecretsManager
from trafficlight.core.exceptions import ConfigError
from trafficlight.core.interfaces.transport import Transport
from trafficlight.core.models.config import TransportConfig
from trafficlight.core.models.state import TransportMode
from trafficlight.transport.cloud_twin import CloudTwinTransport
from trafficlight.transport.http_api import TrafficLightApi
from trafficlight.transport.iothub import DeviceCredentials
from trafficlight.transport.polling import PollingTransport
from trafficlight.transport.push import PushTransport

_log = logging.getLogger(__name__)


def resolve_connection_string(config: TransportConfig, secrets: SecretsManager) -> str:
    """Return the device connection string from the secure store or the config file."""
    if config.use_hardware_credential_store:
        _log.info("Reading connection string from the credential store")
        return secrets.require(CONNECTION_STRING_KEY)
    if not config.connection_string:
        raise ConfigError("transport.connection_string is empty")
    return config.connection_string


def create_transport(config: TransportConfig, secrets: SecretsManager) -> Transport:
    """Build the one transport this process will use.

    Raises:
        ConfigError: If cloud-twin credentials are missing or malformed.
    """
    mode = config.mode
    _log.info("Using %s transport", mode.value)

    if mode is TransportMode.CLOUD_TWIN:
        credentials = DeviceCredentials.from_connection_string(
            resolve_connection_string(config, secrets)
        )
        return CloudTwinTransport(credentials, request_timeout=config.request_timeout_s)

    api = TrafficLightApi(config.api_base_url, timeout=config.request_timeout_s)
    if mode is TransportMode.PUSH:
        return PushTransport(
            api,
            config.push_broker_url,
            hub=config.push_hub,
            keepalive=config.push_keepalive_s,
        )
    return PollingTransport(api, config.polling_interval_ms / 1000)
