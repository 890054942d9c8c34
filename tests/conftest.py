"""Shared fixtures for the bridge tests."""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from mqtt_influx.core.exceptions import WriteError
from mqtt_influx.models import BridgeConfig


# =============================================================================
# DOUBLES
# =============================================================================

class RecordingWriter:
    """Stands in for a TimeSeriesWriter; records every write call."""

    def __init__(self, fail_on: Optional[str] = None):
        self.fail_on = fail_on
        self.writes: List[Tuple[str, float, str, Optional[Dict[str, str]]]] = []
        self.closed = False

    async def write(self, measurement, value, destination, tags=None):
        if measurement == self.fail_on:
            raise WriteError(f"write of '{measurement}' failed: connection refused")
        self.writes.append((measurement, value, destination, tags))

    def close(self):
        self.closed = True


def build_config(measurements: List[Dict[str, Any]], **overrides: Any) -> BridgeConfig:
    row: Dict[str, Any] = {
        "mqtt_host": "localhost",
        "mqtt_port": 1883,
        "mqtt_topic": "sensors/kitchen",
        "influxdb": {
            "version": 2,
            "url": "http://localhost:8086",
            "bucket": "telemetry",
            "org": "home",
            "token": "secret-token",
        },
        "measurements": measurements,
    }
    row.update(overrides)
    return BridgeConfig.from_row(row)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def temperature_config() -> BridgeConfig:
    return build_config([{"name": "temperature", "path": "$.sensors.temp"}])
