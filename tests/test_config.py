"""Configuration document parsing and rejection."""

from pathlib import Path

import pytest

from mqtt_influx.core.exceptions import ConfigError, ConfigurationError
from mqtt_influx.models import BridgeConfig, InfluxSettings, MeasurementDefinition
from mqtt_influx.services.config_service import load_config, parse_config


VALID_TOML = """
mqtt_host = "broker.local"
mqtt_port = 1883
mqtt_topic = "sensors/kitchen"
log_level = "debug"
terminate_on_error = true

[influxdb]
version = 2
url = "http://localhost:8086"
bucket = "telemetry"
org = "home"
token = "secret-token"

[[measurements]]
name = "temperature"
path = "$.sensors.temp"
expression = "value * 1.8 + 32"

[measurements.tags]
room = "kitchen"

[[measurements]]
name = "humidity"
path = "$.sensors.humidity"
"""


def _replace(text: str, old: str, new: str) -> str:
    assert old in text
    return text.replace(old, new)


def test_parse_valid_document():
    config = parse_config(VALID_TOML)

    assert config.mqtt_host == "broker.local"
    assert config.mqtt_port == 1883
    assert config.mqtt_topic == "sensors/kitchen"
    assert config.log_level == "debug"
    assert config.terminate_on_error is True
    assert config.influxdb == InfluxSettings(
        version=2, url="http://localhost:8086", bucket="telemetry", org="home", token="secret-token"
    )
    assert [m.name for m in config.measurements] == ["temperature", "humidity"]
    assert config.measurements[0].expression == "value * 1.8 + 32"
    assert config.measurements[0].tags == {"room": "kitchen"}
    assert config.measurements[1] == MeasurementDefinition(name="humidity", path="$.sensors.humidity")


def test_optional_fields_default():
    text = _replace(VALID_TOML, 'log_level = "debug"\nterminate_on_error = true\n', "")
    config = parse_config(text)

    assert config.log_level is None
    assert config.terminate_on_error is False
    assert config.strict_coercion is False
    assert config.mqtt_client_id == "mqtt_to_influx_bridge"


def test_config_is_immutable():
    config = parse_config(VALID_TOML)
    with pytest.raises(AttributeError):
        config.mqtt_topic = "other"


@pytest.mark.parametrize("version", [0, 3, 99])
def test_unsupported_influx_version_is_config_error(version):
    text = _replace(VALID_TOML, "version = 2", f"version = {version}")
    with pytest.raises(ConfigurationError, match=f"Unsupported InfluxDB version: {version}"):
        parse_config(text)


def test_version_one_without_org_or_token():
    text = _replace(VALID_TOML, 'version = 2', 'version = 1')
    text = _replace(text, 'org = "home"\ntoken = "secret-token"\n', "")
    settings = parse_config(text).influxdb

    assert settings.version == 1
    assert settings.org is None
    assert settings.token is None


@pytest.mark.parametrize("field", ["mqtt_host", "mqtt_port", "mqtt_topic"])
def test_missing_connection_field(field):
    lines = [line for line in VALID_TOML.splitlines() if not line.startswith(f"{field} =")]
    with pytest.raises(ConfigurationError, match=field):
        parse_config("\n".join(lines))


def test_missing_measurement_path():
    text = _replace(VALID_TOML, 'path = "$.sensors.humidity"\n', "")
    with pytest.raises(ConfigurationError, match=r"measurements\[1\].*path"):
        parse_config(text)


def test_wrong_port_type():
    text = _replace(VALID_TOML, "mqtt_port = 1883", 'mqtt_port = "1883"')
    with pytest.raises(ConfigurationError, match="mqtt_port must be int"):
        parse_config(text)


def test_port_out_of_range():
    text = _replace(VALID_TOML, "mqtt_port = 1883", "mqtt_port = 70000")
    with pytest.raises(ConfigurationError, match="valid port"):
        parse_config(text)


def test_non_string_tag_value():
    text = _replace(VALID_TOML, 'room = "kitchen"', "room = 3")
    with pytest.raises(ConfigurationError, match="tags"):
        parse_config(text)


def test_terminate_flag_must_be_bool():
    text = _replace(VALID_TOML, "terminate_on_error = true", 'terminate_on_error = "yes"')
    with pytest.raises(ConfigurationError):
        parse_config(text)


def test_malformed_toml():
    with pytest.raises(ConfigurationError, match="Invalid TOML"):
        parse_config("mqtt_host = ")


def test_missing_influxdb_table():
    with pytest.raises(ConfigurationError, match="influxdb"):
        BridgeConfig.from_row({
            "mqtt_host": "localhost", "mqtt_port": 1883, "mqtt_topic": "t", "measurements": [],
        })


def test_load_config_from_file(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text(VALID_TOML, encoding="utf-8")

    config = load_config(path)

    assert len(config.measurements) == 2


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(ConfigurationError, match="Failed to read config file"):
        load_config(tmp_path / "nope.toml")


def test_config_error_alias():
    assert ConfigError is ConfigurationError
