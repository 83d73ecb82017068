"""Transports: polling, push hub and cloud twin, plus the selecting factory."""

from trafficlight.transport.cloud_twin import CloudTwinTransport
from trafficlight.transport.factory import create_transport
from trafficlight.transport.http_api import TrafficLightApi
from trafficlight.transport.polling import PollingTransport
from trafficlight.transport.push import PushTransport

__all__ = [
    "CloudTwinTransport",
    "PollingTransport",
    "PushTransport",
    "TrafficLightApi",
    "create_transport",
]
