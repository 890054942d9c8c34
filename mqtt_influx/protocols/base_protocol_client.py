"""
Messaging Protocol Client Framework
Base abstract class and event types shared by the transport adapters
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
import asyncio
import logging
from enum import Enum

from mqtt_influx.core.exceptions import ProtocolError
from mqtt_influx.models import BridgeConfig


class ConnectionState(Enum):
    """Connection state enumeration."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    ERROR = "error"


@dataclass(frozen=True)
class InboundMessage:
    """A publish packet received on the subscribed topic."""
    topic: str
    payload: bytes
    qos: int = 0
    retain: bool = False


@dataclass(frozen=True)
class TransportFault:
    """Link-level failure reported by the transport (not a message problem)."""
    error: Exception


@dataclass(frozen=True)
class LinkEvent:
    """Any other notification (connack, suback, ...); the bridge ignores these."""
    kind: str
    detail: str = ""


ProtocolEvent = Union[InboundMessage, TransportFault, LinkEvent]


class ProtocolClientConfig:
    """Configuration class for protocol clients."""

    def __init__(self,
                 host: str,
                 port: int,
                 topic: str,
                 client_id: str,
                 qos: int = 1,
                 keepalive: int = 5,
                 timeout: float = 30.0,
                 reconnect_min_delay: int = 1,
                 reconnect_max_delay: int = 5,
                 queue_size: int = 1000):
        self.host = host
        self.port = port
        self.topic = topic
        self.client_id = client_id
        self.qos = qos
        self.keepalive = keepalive
        self.timeout = timeout
        self.reconnect_min_delay = reconnect_min_delay
        self.reconnect_max_delay = reconnect_max_delay
        self.queue_size = queue_size

    @classmethod
    def from_bridge_config(cls, config: BridgeConfig, **overrides: Any) -> "ProtocolClientConfig":
        params: Dict[str, Any] = dict(
            host=config.mqtt_host,
            port=config.mqtt_port,
            topic=config.mqtt_topic,
            client_id=config.mqtt_client_id,
        )
        params.update(overrides)
        return cls(**params)


class BaseProtocolClient(ABC):
    """
    Abstract base class for publish/subscribe transport clients.

    ``start`` runs the fixed connect sequence (validate, initialize, connect,
    subscribe). Afterwards the transport pushes events from its own thread and
    the consumer pulls them one at a time with ``next_event``.
    """

    def __init__(self, config: ProtocolClientConfig):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self.connection_state = ConnectionState.DISCONNECTED
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._events: Optional[asyncio.Queue] = None

    # Template method - defines the startup skeleton
    async def start(self):
        """Connect and subscribe once. Any failure here is a ``ProtocolError``."""
        self._bind_loop()
        try:
            # Step 1: Validate configuration
            self._validate_config()

            # Step 2: Initialize client
            await self._initialize_client()

            # Step 3: Connect
            self.connection_state = ConnectionState.CONNECTING
            await self._connect()
            self.connection_state = ConnectionState.CONNECTED

            # Step 4: Setup subscriptions
            await self._setup_monitoring()

        except ProtocolError:
            self.connection_state = ConnectionState.ERROR
            await self._cleanup()
            raise
        except Exception as e:
            self.connection_state = ConnectionState.ERROR
            await self._cleanup()
            raise ProtocolError(f"Failed to start {self.__class__.__name__}: {e}") from e

    async def stop(self):
        """Stop the client gracefully."""
        self.logger.info("Stopping client...")
        await self._cleanup()

    async def next_event(self) -> ProtocolEvent:
        """Suspend until the transport delivers the next event."""
        if self._events is None:
            raise ProtocolError("Client has not been started")
        return await self._events.get()

    def _bind_loop(self):
        self._loop = asyncio.get_running_loop()
        self._events = asyncio.Queue(maxsize=self.config.queue_size)

    def _emit(self, event: ProtocolEvent):
        """Hand an event to the asyncio side; safe to call from the transport thread."""
        if self._loop is None or self._loop.is_closed():
            self.logger.debug(f"Dropping {event!r}: no event loop bound")
            return
        self._loop.call_soon_threadsafe(self._enqueue, event)

    def _enqueue(self, event: ProtocolEvent):
        # runs on the loop thread; a full queue means the consumer has fallen behind
        try:
            self._events.put_nowait(event)
        except asyncio.QueueFull:
            self.logger.warning(f"Event queue full ({self._events.maxsize}), dropping {event.__class__.__name__}")

    # Abstract methods that subclasses must implement (Strategy pattern)
    @abstractmethod
    async def _initialize_client(self):
        """Initialize the protocol-specific client."""
        pass

    @abstractmethod
    async def _connect(self):
        """Establish connection to the protocol server/broker."""
        pass

    @abstractmethod
    async def _disconnect(self):
        """Disconnect from the protocol server/broker."""
        pass

    @abstractmethod
    async def _setup_monitoring(self):
        """Setup subscriptions."""
        pass

    @abstractmethod
    def _validate_config(self):
        """Validate protocol-specific configuration."""
        pass

    async def _cleanup(self):
        """Cleanup resources."""
        try:
            await self._disconnect()
        except Exception as e:
            self.logger.error(f"Error during cleanup: {e}")
        self.connection_state = ConnectionState.DISCONNECTED

    # Utility methods
    def is_connected(self) -> bool:
        """Check if client is connected."""
        return self.connection_state == ConnectionState.CONNECTED
