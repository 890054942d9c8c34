"""InfluxDB 1.x writer (``/write`` endpoint, database + optional basic auth)."""

from datetime import datetime
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

from influxdb import InfluxDBClient

from mqtt_influx.models import InfluxSettings
from .base_writer import TimeSeriesWriter, FIELD_NAME


DEFAULT_PORT = 8086


def split_credentials(token: Optional[str]) -> Optional[Tuple[str, str]]:
    """``"user:password"`` -> ``("user", "password")``; anything else means no auth."""
    if not token:
        return None
    parts = token.split(":")
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


class InfluxV1Writer(TimeSeriesWriter):
    version = 1

    def __init__(self, settings: InfluxSettings, client: Optional[InfluxDBClient] = None):
        super().__init__(settings)
        self.client = client or self._create_client(settings)

    def _create_client(self, settings: InfluxSettings) -> InfluxDBClient:
        url = urlparse(settings.url)
        params: Dict[str, Any] = {
            "host": url.hostname or "localhost",
            "port": url.port or DEFAULT_PORT,
            "database": settings.bucket,
            "ssl": url.scheme == "https",
            "verify_ssl": url.scheme == "https",
            "path": url.path.strip("/"),
        }

        # Auth is attached once, here, and reused for every write
        credentials = split_credentials(settings.token)
        if credentials:
            params["username"], params["password"] = credentials
        elif settings.token:
            self.logger.warning("InfluxDB v1 token is not of the form 'user:password'; writing without auth")

        self.logger.info(f"InfluxDB v1 client for {settings.url} (database: {settings.bucket})")
        return InfluxDBClient(**params)

    def _build_point(self, measurement: str, value: float, tags: Dict[str, str], timestamp: datetime) -> Dict[str, Any]:
        return {
            "measurement": measurement,
            "time": timestamp,
            "fields": {FIELD_NAME: value},
            "tags": dict(tags),
        }

    def _write_point(self, point: Dict[str, Any], destination: str) -> None:
        # The v1 database is fixed at client construction; destination is the same name.
        self.client.write_points([point])

    def _close(self) -> None:
        self.client.close()
