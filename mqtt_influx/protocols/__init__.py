"""Transport client implementations."""

from .base_protocol_client import (
    BaseProtocolClient,
    ProtocolClientConfig,
    ConnectionState,
    InboundMessage,
    TransportFault,
    LinkEvent,
    ProtocolEvent,
)

from .mqtt_client import MQTTClient

__all__ = [
    # Base classes
    'BaseProtocolClient',
    'ProtocolClientConfig',
    'ConnectionState',

    # Events
    'InboundMessage',
    'TransportFault',
    'LinkEvent',
    'ProtocolEvent',

    # Implementations
    'MQTTClient',
]
