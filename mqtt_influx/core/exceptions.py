"""
Centralised exception definitions for the MQTT to InfluxDB bridge.
All custom exceptions should inherit from BridgeError.
"""

class BridgeError(Exception):
    """Base class for every custom exception thrown by this project."""

class ConfigurationError(BridgeError):
    """Raised when the configuration document or environment variables are invalid."""

# Short alias used by callers that only care about the configuration contract.
ConfigError = ConfigurationError

class ProtocolError(BridgeError):
    """Transport-level failure inside the MQTT client (connect, subscribe, link loss)."""

class WriteError(BridgeError):
    """A time-series backend rejected or failed a point write."""

class ProcessError(BridgeError):
    """A single inbound message could not be processed."""

class PayloadEncodingError(ProcessError):
    """Payload bytes are not valid UTF-8."""

class PayloadJsonError(ProcessError):
    """Payload text is not a valid JSON document."""

class PathQueryError(ProcessError):
    """A measurement's path query does not compile."""

class MeasurementWriteError(ProcessError):
    """Writing a measurement failed; remaining measurements of the message are skipped."""
