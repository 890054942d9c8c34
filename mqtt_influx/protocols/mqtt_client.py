"""
MQTT Protocol Client Implementation
paho-mqtt adapter that turns broker callbacks into bridge events
"""

import asyncio
import logging
from typing import Optional
import paho.mqtt.client as mqtt
from mqtt_influx.core.exceptions import ProtocolError
from mqtt_influx.protocols.base_protocol_client import (
    BaseProtocolClient,
    ConnectionState,
    InboundMessage,
    LinkEvent,
    ProtocolClientConfig,
    TransportFault,
)


class MQTTClient(BaseProtocolClient):
    """
    MQTT client for a single subscribed topic.

    Features:
    - Single topic subscription at QoS 1 (at least once)
    - Re-subscription after every automatic reconnect
    - Thread-safe hand-off of paho callbacks to the asyncio loop
    """

    def __init__(self, config: ProtocolClientConfig):
        super().__init__(config)

        # MQTT-specific attributes
        self.client: Optional[mqtt.Client] = None
        self.subscribed = False

    def _validate_config(self):
        """Validate MQTT-specific configuration."""
        if not self.config.host:
            raise ValueError("MQTT broker host is required")

        if not isinstance(self.config.port, int) or not (1 <= self.config.port <= 65535):
            raise ValueError("MQTT broker port must be a valid port number")

        if not self.config.topic:
            raise ValueError("MQTT topic is required")

    async def _initialize_client(self):
        """Initialize the MQTT client."""
        self.client = mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=self.config.client_id,
            clean_session=True,
            protocol=mqtt.MQTTv311,
        )
        # paho reconnects on its own after a link failure; this bounds its delay
        self.client.reconnect_delay_set(
            min_delay=self.config.reconnect_min_delay,
            max_delay=self.config.reconnect_max_delay,
        )

        # Set callbacks
        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect
        self.client.on_message = self._on_message
        self.client.on_subscribe = self._on_subscribe
        self.client.on_log = self._on_log

        self.logger.info(f"MQTT client initialized with ID: {self.config.client_id}")

    async def _connect(self):
        """Establish connection to MQTT broker."""
        self.logger.info(f"Connecting to MQTT broker at {self.config.host}:{self.config.port}")

        result = self.client.connect(
            host=self.config.host,
            port=self.config.port,
            keepalive=self.config.keepalive,
        )
        if result != mqtt.MQTT_ERR_SUCCESS:
            raise ProtocolError(f"MQTT connection failed with code: {result}")

        # Start the network loop in a separate thread
        self.client.loop_start()

        # Wait for CONNACK
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        while not self.client.is_connected():
            if self.connection_state == ConnectionState.ERROR:
                raise ProtocolError("MQTT broker refused the connection")
            if loop.time() - start_time > self.config.timeout:
                raise ProtocolError(f"Connection timeout after {self.config.timeout}s")
            await asyncio.sleep(0.1)

        self.logger.info("Successfully connected to MQTT broker")

    async def _disconnect(self):
        """Disconnect from MQTT broker."""
        if not self.client:
            return
        if self.client.is_connected():
            self.logger.info("Disconnecting from MQTT broker")
            self.client.disconnect()
        self.client.loop_stop()
        self.subscribed = False

    async def _setup_monitoring(self):
        """Subscribe to the configured topic."""
        self._subscribe()
        self.subscribed = True
        self.logger.info(f"Connected to MQTT and subscribed to {self.config.topic}")

    def _subscribe(self):
        result, mid = self.client.subscribe(self.config.topic, self.config.qos)
        if result != mqtt.MQTT_ERR_SUCCESS:
            raise ProtocolError(f"Failed to subscribe to topic '{self.config.topic}': {result}")

    # MQTT Event Callbacks (paho network thread)
    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        """Callback for when client connects to broker."""
        if reason_code.is_failure:
            self.logger.error(f"Connection refused by MQTT broker: {reason_code}")
            self.connection_state = ConnectionState.ERROR
            if self.subscribed:
                self._emit(TransportFault(ProtocolError(f"Reconnect refused: {reason_code}")))
            return

        self.connection_state = ConnectionState.CONNECTED
        if self.subscribed:
            # clean session: the broker forgot the subscription
            try:
                self._subscribe()
            except ProtocolError as e:
                self._emit(TransportFault(e))
                return
            self.logger.info(f"Reconnected to MQTT broker, re-subscribed to {self.config.topic}")
        self._emit(LinkEvent("connected", str(flags)))

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties=None):
        """Callback for when client disconnects from broker."""
        if reason_code.is_failure:
            self.logger.warning(f"Unexpected disconnection from MQTT broker ({reason_code})")
            self.connection_state = ConnectionState.RECONNECTING
            self._emit(TransportFault(ProtocolError(f"Connection to MQTT broker lost: {reason_code}")))
        else:
            self.logger.info("Disconnected from MQTT broker")
            self.connection_state = ConnectionState.DISCONNECTED

    def _on_message(self, client, userdata, msg):
        """Callback for when a message is received."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"Received message on topic '{msg.topic}': {len(msg.payload)} bytes")
        self._emit(InboundMessage(
            topic=msg.topic,
            payload=bytes(msg.payload),
            qos=msg.qos,
            retain=bool(msg.retain),
        ))

    def _on_subscribe(self, client, userdata, mid, reason_code_list, properties=None):
        """Callback for when subscription is acknowledged."""
        refused = [rc for rc in reason_code_list if rc.is_failure]
        if refused:
            self.logger.error(f"Subscription to '{self.config.topic}' refused: {refused}")
            self._emit(TransportFault(ProtocolError(f"Subscription to '{self.config.topic}' refused")))
            return
        self.logger.info(f"Subscription acknowledged with QoS: {[int(rc.value) for rc in reason_code_list]}")
        self._emit(LinkEvent("subscribed", self.config.topic))

    def _on_log(self, client, userdata, level, buf):
        """Callback for MQTT client logging."""
        # Map MQTT log levels to Python logging levels
        level_map = {
            mqtt.MQTT_LOG_DEBUG: logging.DEBUG,
            mqtt.MQTT_LOG_INFO: logging.DEBUG,
            mqtt.MQTT_LOG_NOTICE: logging.INFO,
            mqtt.MQTT_LOG_WARNING: logging.WARNING,
            mqtt.MQTT_LOG_ERR: logging.ERROR
        }

        python_level = level_map.get(level, logging.DEBUG)
        self.logger.log(python_level, f"MQTT: {buf}")
