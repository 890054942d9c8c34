"""Process entry point: parse arguments, load configuration, run the bridge."""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from mqtt_influx import __description__, __version__
from mqtt_influx.config import configure, settings
from mqtt_influx.core.exceptions import BridgeError
from mqtt_influx.protocols import MQTTClient, ProtocolClientConfig
from mqtt_influx.services.bridge_service import BridgeService
from mqtt_influx.services.config_service import load_config
from mqtt_influx.writers import WriterFactory


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="mqtt-to-influx", description=__description__)
    parser.add_argument(
        "-c", "--config",
        default=settings.CONFIG_PATH,
        help="Path to the configuration file (default: %(default)s)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


async def async_main(config_path: str):
    config = load_config(config_path)
    configure(config.log_level)

    writer = WriterFactory.create(config.influxdb)
    client = MQTTClient(ProtocolClientConfig.from_bridge_config(config))
    await BridgeService(config, client, writer).run()


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    configure()
    try:
        asyncio.run(async_main(args.config))
    except KeyboardInterrupt:
        logger.info("graceful shutdown")
    except BridgeError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        sys.exit(str(e))


if __name__ == "__main__":
    main()
