from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from mqtt_influx.core.exceptions import ConfigurationError


DEFAULT_CLIENT_ID = "mqtt_to_influx_bridge"
SUPPORTED_INFLUX_VERSIONS = (1, 2)


###############################################################################
# 1. INFLUXDB DESTINATION ------------------------------------------------------
###############################################################################

@dataclass(frozen=True, slots=True)
class InfluxSettings:
    """Immutable projection of the ``[influxdb]`` table."""
    version: int                      # 1 -> legacy write API, 2 -> bucket API
    url: str
    bucket: str                       # bucket (v2) or database (v1)
    org: Optional[str] = None
    token: Optional[str] = None       # "user:password" on v1, API token on v2

    # ---------- factory --------------------------------------------------- #
    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "InfluxSettings":
        row = _require_table(row, "influxdb")
        version = _require(row, "version", int, "influxdb")
        if version not in SUPPORTED_INFLUX_VERSIONS:
            raise ConfigurationError(f"Unsupported InfluxDB version: {version}")
        return cls(
            version = version,
            url     = _require(row, "url", str, "influxdb"),
            bucket  = _require(row, "bucket", str, "influxdb"),
            org     = _optional(row, "org", str, "influxdb"),
            token   = _optional(row, "token", str, "influxdb"),
        )

###############################################################################
# 2. MEASUREMENT DEFINITION ----------------------------------------------------
###############################################################################

@dataclass(frozen=True, slots=True)
class MeasurementDefinition:
    """One ``[[measurements]]`` entry: where to find a value and where to write it."""
    name: str
    path: str
    expression: Optional[str] = None
    tags: Optional[Dict[str, str]] = None

    # ---------- factory --------------------------------------------------- #
    @classmethod
    def from_row(cls, row: Mapping[str, Any], index: int = 0) -> "MeasurementDefinition":
        where = f"measurements[{index}]"
        row = _require_table(row, where)
        tags = _optional(row, "tags", dict, where)
        if tags is not None:
            for key, value in tags.items():
                if not isinstance(key, str) or not isinstance(value, str):
                    raise ConfigurationError(f"{where}.tags must map strings to strings (got {key!r} = {value!r})")
            tags = dict(tags)
        return cls(
            name       = _require(row, "name", str, where),
            path       = _require(row, "path", str, where),
            expression = _optional(row, "expression", str, where),
            tags       = tags,
        )

###############################################################################
# 3. BRIDGE CONFIGURATION (ROOT) -----------------------------------------------
###############################################################################

@dataclass(frozen=True, slots=True)
class BridgeConfig:
    """Whole configuration document. Loaded once at startup and only read afterwards."""
    mqtt_host: str
    mqtt_port: int
    mqtt_topic: str
    influxdb: InfluxSettings
    measurements: Tuple[MeasurementDefinition, ...] = field(default_factory=tuple)
    mqtt_client_id: str = DEFAULT_CLIENT_ID
    log_level: Optional[str] = None
    terminate_on_error: bool = False
    strict_coercion: bool = False

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "BridgeConfig":
        row = _require_table(row, "configuration")
        port = _require(row, "mqtt_port", int, "configuration")
        if not 1 <= port <= 65535:
            raise ConfigurationError(f"mqtt_port must be a valid port number (got {port})")

        raw_measurements = _require(row, "measurements", list, "configuration")
        measurements = tuple(
            MeasurementDefinition.from_row(item, index)
            for index, item in enumerate(raw_measurements)
        )

        return cls(
            mqtt_host          = _require(row, "mqtt_host", str, "configuration"),
            mqtt_port          = port,
            mqtt_topic         = _require(row, "mqtt_topic", str, "configuration"),
            influxdb           = InfluxSettings.from_row(_require(row, "influxdb", dict, "configuration")),
            measurements       = measurements,
            mqtt_client_id     = _optional(row, "mqtt_client_id", str, "configuration") or DEFAULT_CLIENT_ID,
            log_level          = _optional(row, "log_level", str, "configuration"),
            terminate_on_error = bool(_optional(row, "terminate_on_error", bool, "configuration") or False),
            strict_coercion    = bool(_optional(row, "strict_coercion", bool, "configuration") or False),
        )

###############################################################################
# 4. HELPER PARSERS -----------------------------------------------------------
###############################################################################

def _require_table(row: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(row, Mapping):
        raise ConfigurationError(f"{where} must be a table, got {type(row).__name__}")
    return row

def _require(row: Mapping[str, Any], key: str, kind: type, where: str) -> Any:
    """Fetch a mandatory key and check its type."""
    if key not in row or row[key] is None:
        raise ConfigurationError(f"{where}: missing required field '{key}'")
    return _check_type(row[key], key, kind, where)

def _optional(row: Mapping[str, Any], key: str, kind: type, where: str) -> Any:
    value = row.get(key)
    if value is None:
        return None
    return _check_type(value, key, kind, where)

def _check_type(value: Any, key: str, kind: type, where: str) -> Any:
    # bool is an int subclass; a port of `true` is still wrong
    if kind is int and isinstance(value, bool):
        raise ConfigurationError(f"{where}.{key} must be int, got bool")
    if not isinstance(value, kind):
        raise ConfigurationError(f"{where}.{key} must be {kind.__name__}, got {type(value).__name__}")
    return value
