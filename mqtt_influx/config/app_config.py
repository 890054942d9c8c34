"""Centralised application settings (dotenv + env overrides)."""
from __future__ import annotations
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv(Path.cwd() / ".env", override=False)

class settings:                            # pylint: disable=too-few-public-methods
    CONFIG_PATH      = os.getenv("MQTT_INFLUX_CONFIG", "config.toml")
    LOG_LEVEL        = os.getenv("LOG_LEVEL")          # wins over the document's log_level
    DEFAULT_LOG_LEVEL = "INFO"
