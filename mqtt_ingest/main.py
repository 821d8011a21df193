"""CLI entry point del puente MQTT → InfluxDB."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import Optional, Sequence

from common.config import get_settings

from .parsing.assembler import MessageParser
from .parsing.errors import ConfigurationError
from .storage.influx_writer import InfluxWriter
from .transport.message_handler import MessageHandler
from .transport.mqtt_client import MQTTClient

logger = logging.getLogger(__name__)

EXIT_CONFIG_ERROR = 2
EXIT_CONNECTION_ERROR = 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = argparse.ArgumentParser(description="MQTT → InfluxDB ingest bridge")
    p.add_argument("--env-file", default=None, help="path to a .env file")
    p.add_argument("--verbose", action="store_true", help="enable debug logging")
    args = p.parse_args(argv)

    settings = get_settings(args.env_file)
    verbose = args.verbose or settings.verbose

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    logger.info("[MAIN] Application start")

    try:
        parser = MessageParser(settings.parser)
    except ConfigurationError as e:
        logger.error("[MAIN] Invalid parser configuration: %s", e)
        return EXIT_CONFIG_ERROR

    logger.info(
        "[MAIN] Parser: mode=%s numeric_parser_mode=%s",
        settings.parser.mode, settings.parser.numeric_parser_mode,
    )

    writer = InfluxWriter(settings.influx)
    writer.add_error_listener(
        lambda topic, message: logger.warning("[MAIN] Storage failure (%s): %s", topic, message)
    )

    handler = MessageHandler(parser, writer)
    client = MQTTClient(settings.mqtt)
    client.set_message_handler(handler.handle)

    if not client.connect():
        writer.close()
        return EXIT_CONNECTION_ERROR

    try:
        while True:
            time.sleep(settings.stats_interval_seconds)
            stat = writer.collect_stats()
            logger.info(
                "[MAIN] Writes: total=%d interval=%d max_concurrent=%d",
                stat["total"], stat["interval"], stat["max_concurrent"],
            )
            logger.info("[MAIN] %s", handler.stats)
    except KeyboardInterrupt:
        logger.info("[MAIN] Shutting down")
    finally:
        client.disconnect()
        writer.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
