"""Bridge services: configuration loading, message processing, event loop."""

from .config_service import load_config, parse_config
from .message_processor import MessageProcessor, process_message
from .bridge_service import BridgeService, RECONNECT_BACKOFF_SECONDS

__all__ = [
    'load_config',
    'parse_config',
    'MessageProcessor',
    'process_message',
    'BridgeService',
    'RECONNECT_BACKOFF_SECONDS',
]
