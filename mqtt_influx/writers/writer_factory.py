from types import MappingProxyType
from typing import Mapping, Type

from mqtt_influx.core.exceptions import ConfigurationError
from mqtt_influx.models import InfluxSettings
from .base_writer import TimeSeriesWriter
from .influx_v1_writer import InfluxV1Writer
from .influx_v2_writer import InfluxV2Writer


class WriterFactory:

    # Closed set: a new protocol means a new variant here, not a runtime hook.
    _registry: Mapping[int, Type[TimeSeriesWriter]] = MappingProxyType({
        1: InfluxV1Writer,
        2: InfluxV2Writer,
    })

    @classmethod
    def create(cls, settings: InfluxSettings) -> TimeSeriesWriter:
        """
        Create the writer matching ``settings.version``.

        Args:
            settings (InfluxSettings): Destination settings from the configuration

        Returns:
            TimeSeriesWriter: InfluxV1Writer or InfluxV2Writer
        """
        handler = cls._registry.get(settings.version)
        if not handler:
            raise ConfigurationError(f"Unsupported InfluxDB version: {settings.version}")
        return handler(settings)

    @classmethod
    def supported_versions(cls):
        return tuple(cls._registry)
