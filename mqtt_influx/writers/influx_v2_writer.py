"""InfluxDB 2.x writer (org + token, single-point batch into a bucket)."""

from datetime import datetime
from typing import Dict, Optional

from influxdb_client import InfluxDBClient, Point, WritePrecision
from influxdb_client.client.write_api import SYNCHRONOUS

from mqtt_influx.models import InfluxSettings
from .base_writer import TimeSeriesWriter, FIELD_NAME


class InfluxV2Writer(TimeSeriesWriter):
    version = 2

    def __init__(self, settings: InfluxSettings, client: Optional[InfluxDBClient] = None):
        super().__init__(settings)
        self.org = settings.org or ""
        self.client = client or InfluxDBClient(
            url=settings.url,
            token=settings.token or "",
            org=self.org,
        )
        self.write_api = self.client.write_api(write_options=SYNCHRONOUS)
        self.logger.info(f"InfluxDB v2 client for {settings.url} (org: {self.org or '-'})")

    def _build_point(self, measurement: str, value: float, tags: Dict[str, str], timestamp: datetime) -> Point:
        point = Point(measurement).field(FIELD_NAME, value)
        for key, val in tags.items():
            point = point.tag(key, val)
        return point.time(timestamp, WritePrecision.NS)

    def _write_point(self, point: Point, destination: str) -> None:
        self.write_api.write(bucket=destination, org=self.org, record=[point])

    def _close(self) -> None:
        self.write_api.close()
        self.client.close()
