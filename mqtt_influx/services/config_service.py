# config_service.py

import logging
import tomllib
from pathlib import Path
from typing import Union

from mqtt_influx.core.exceptions import ConfigurationError
from mqtt_influx.models import BridgeConfig


logger = logging.getLogger(__name__)


def load_config(path: Union[str, Path]) -> BridgeConfig:
    """Read and validate the TOML configuration document at ``path``.

    The file is read exactly once; the returned object is immutable and is
    what every other component receives.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Failed to read config file {path}: {e}") from e

    config = parse_config(raw, source=str(path))
    logger.info(f"Loaded {len(config.measurements)} measurement definitions from {path}")
    return config


def parse_config(text: str, source: str = "<string>") -> BridgeConfig:
    """Parse a TOML document into a ``BridgeConfig``."""
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {source}: {e}") from e
    return BridgeConfig.from_row(document)
