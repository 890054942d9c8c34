"""Inbound payload -> one point per matching measurement definition."""
from __future__ import annotations
import json
import logging
import math
from typing import List, Tuple

from mqtt_influx.core.exceptions import (
    MeasurementWriteError,
    PayloadEncodingError,
    PayloadJsonError,
    WriteError,
)
from mqtt_influx.mapping import MappingPipeline, MeasurementMapperFactory
from mqtt_influx.models import BridgeConfig, MeasurementDefinition
from mqtt_influx.writers import TimeSeriesWriter


class MessageProcessor:
    """Extracts, coerces, transforms and writes every configured measurement.

    Definitions are handled in configuration order, one at a time. A skipped
    definition never affects the others; a failed write aborts the rest of
    the message.
    """

    def __init__(self, config: BridgeConfig, writer: TimeSeriesWriter):
        self.config = config
        self.writer = writer
        self.log = logging.getLogger(self.__class__.__name__)
        self.pipelines: List[Tuple[MeasurementDefinition, MappingPipeline]] = [
            (definition, MeasurementMapperFactory.create_mapper(definition, config.strict_coercion))
            for definition in config.measurements
        ]

    async def process(self, payload: bytes) -> int:
        """Process one payload and return the number of points written."""
        document = self._decode(payload)
        bucket = self.config.influxdb.bucket
        written = 0

        for definition, pipeline in self.pipelines:
            value = pipeline.process(document)       # PathQueryError propagates
            if value is None:
                continue

            self.log.debug("Writing measurement: %s = %s", definition.name, value)
            try:
                await self.writer.write(definition.name, value, bucket, definition.tags)
            except WriteError as e:
                raise MeasurementWriteError(str(e)) from e
            written += 1

        return written

    @staticmethod
    def _decode(payload: bytes):
        try:
            text = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as e:
            raise PayloadEncodingError(f"Payload is not valid UTF-8: {e}") from e
        try:
            return json.loads(
                text,
                parse_int=_finite_number,
                parse_float=_finite_number,
                parse_constant=_reject_constant,
            )
        except RecursionError as e:
            raise PayloadJsonError("Payload is nested too deeply") from e
        except ValueError as e:
            # JSONDecodeError, NaN/Infinity and numbers that overflow a float
            raise PayloadJsonError(f"Payload is not valid JSON: {e}") from e


def _finite_number(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"number out of range: {text[:32]}")
    return value


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a JSON number")


async def process_message(payload: bytes, config: BridgeConfig, writer: TimeSeriesWriter) -> int:
    """One-shot form of ``MessageProcessor.process`` for callers without a long-lived processor."""
    return await MessageProcessor(config, writer).process(payload)
