"""
Time-series writer interface.

One write call persists one point: the measurement name, a single float field
called ``value``, the definition's tags and a wall-clock timestamp taken at
write time. Variants differ only in how that point is framed on the wire.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import asyncio
import logging

from mqtt_influx.core.exceptions import WriteError
from mqtt_influx.models import InfluxSettings


FIELD_NAME = "value"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimeSeriesWriter(ABC):
    """Abstract base class for the InfluxDB protocol variants."""

    version: int = 0

    def __init__(self, settings: InfluxSettings):
        self.settings = settings
        self.logger = logging.getLogger(self.__class__.__name__)

    async def write(self, measurement: str, value: float, destination: str,
                    tags: Optional[Dict[str, str]] = None) -> None:
        """Write one point. Any backend or transport failure surfaces as ``WriteError``."""
        point = self._build_point(measurement, float(value), tags or {}, utc_now())
        try:
            await asyncio.to_thread(self._write_point, point, destination)
        except Exception as e:
            raise WriteError(f"InfluxDB v{self.version} write of '{measurement}' failed: {e}") from e

    def close(self):
        """Release the underlying HTTP client."""
        try:
            self._close()
        except Exception as e:
            self.logger.error(f"Error closing InfluxDB client: {e}")

    @abstractmethod
    def _build_point(self, measurement: str, value: float, tags: Dict[str, str], timestamp: datetime) -> Any:
        """Frame a single point for this protocol."""
        pass

    @abstractmethod
    def _write_point(self, point: Any, destination: str) -> None:
        """Blocking write of one point; runs in a worker thread."""
        pass

    @abstractmethod
    def _close(self) -> None:
        pass
