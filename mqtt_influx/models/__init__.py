"""Configuration models and domain objects."""

from .settings_models import (
    BridgeConfig,
    InfluxSettings,
    MeasurementDefinition,
)

__all__ = [
    'BridgeConfig',
    'InfluxSettings',
    'MeasurementDefinition',
]
