"""Time-series writer variants."""

from .base_writer import TimeSeriesWriter, FIELD_NAME
from .influx_v1_writer import InfluxV1Writer
from .influx_v2_writer import InfluxV2Writer
from .writer_factory import WriterFactory

__all__ = [
    'TimeSeriesWriter',
    'FIELD_NAME',
    'InfluxV1Writer',
    'InfluxV2Writer',
    'WriterFactory',
]
