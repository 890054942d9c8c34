"""Central coordinator: subscribe once, then process inbound messages one by one."""
from __future__ import annotations
import asyncio
import logging
from typing import Optional

from mqtt_influx.core.exceptions import BridgeError, ProcessError, ProtocolError
from mqtt_influx.core.patterns import BridgeState, StateMachine
from mqtt_influx.models import BridgeConfig
from mqtt_influx.protocols import (
    BaseProtocolClient,
    InboundMessage,
    ProtocolEvent,
    TransportFault,
)
from mqtt_influx.services.message_processor import MessageProcessor
from mqtt_influx.writers import TimeSeriesWriter


# Fixed pause after a transport fault; no growth, no jitter, no retry cap.
RECONNECT_BACKOFF_SECONDS = 5.0


class BridgeService:
    def __init__(self,
                 config: BridgeConfig,
                 client: BaseProtocolClient,
                 writer: TimeSeriesWriter,
                 processor: Optional[MessageProcessor] = None,
                 backoff: float = RECONNECT_BACKOFF_SECONDS):
        self.config    = config
        self.client    = client
        self.writer    = writer
        self.processor = processor or MessageProcessor(config, writer)
        self.backoff   = backoff
        self.state     = StateMachine(BridgeState.CONNECTING)
        self.log       = logging.getLogger(self.__class__.__name__)
        self.processed = 0
        self.failed    = 0

    @property
    def terminate_on_error(self) -> bool:
        return self.config.terminate_on_error

    # --------------------------------------------------------------------- #
    #  Public API
    # --------------------------------------------------------------------- #
    async def run(self):
        """Run until a fatal error; the error is re-raised to the caller."""
        try:
            await self.startup()
            while self.state.running:
                event = await self.client.next_event()
                await self.handle_event(event)
        finally:
            await self.shutdown()

    async def startup(self):
        try:
            await self.client.start()
        except ProtocolError:
            self.state.transition(BridgeState.TERMINATED)
            raise
        self.state.transition(BridgeState.CONNECTED)
        self.log.info("bridge ready (%d measurements, terminate_on_error=%s)",
                      len(self.config.measurements), self.terminate_on_error)

    async def handle_event(self, event: ProtocolEvent):
        if isinstance(event, InboundMessage):
            await self._handle_message(event)
        elif isinstance(event, TransportFault):
            await self._handle_fault(event)
        # anything else (connack, suback, ...) is ignored

    async def shutdown(self):
        self.state.transition(BridgeState.TERMINATED)
        await self.client.stop()
        self.writer.close()
        self.log.info("bridge stopped (%d messages processed, %d failed)", self.processed, self.failed)

    # --------------------------------------------------------------------- #
    #  Private helpers
    # --------------------------------------------------------------------- #
    async def _handle_message(self, message: InboundMessage):
        try:
            await self.processor.process(message.payload)
        except ProcessError as e:
            self.failed += 1
            self.log.error("Error processing message: %s", e)
            if self.terminate_on_error:
                self._terminate(e)
            # message is consumed and dropped
            return
        self.processed += 1

    async def _handle_fault(self, fault: TransportFault):
        self.log.error("Error in event loop: %s", fault.error)
        if self.terminate_on_error:
            self._terminate(fault.error)
        await asyncio.sleep(self.backoff)

    def _terminate(self, error: Exception):
        self.state.transition(BridgeState.TERMINATED)
        if isinstance(error, BridgeError):
            raise error
        raise ProtocolError(str(error)) from error
