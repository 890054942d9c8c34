# mqtt_influx/core/__init__.py
"""Core infrastructure components for the MQTT to InfluxDB bridge."""

# Import order: most fundamental to most specific

from .exceptions import (
    BridgeError,
    ConfigurationError,
    ConfigError,
    ProtocolError,
    WriteError,
    ProcessError,
    PayloadEncodingError,
    PayloadJsonError,
    PathQueryError,
    MeasurementWriteError,
)

from .patterns.state_machine import StateMachine, BridgeState


__all__ = [
    "StateMachine",
    "BridgeState",
    "BridgeError",               # make available at package root
    "ConfigurationError",
    "ConfigError",
    "ProtocolError",
    "WriteError",
    "ProcessError",
    "PayloadEncodingError",
    "PayloadJsonError",
    "PathQueryError",
    "MeasurementWriteError",
]
