"""Command-line entry point: ``python -m sensorbridge [port] [baud] [host] [http_port] [db_path]``."""

import argparse
import logging
import sys
from typing import Optional

import uvicorn

from sensorbridge import config

LOGGER = logging.getLogger("sensorbridge")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sensorbridge", description="Serial sensor device to HTTP bridge"
    )
    parser.add_argument("port", nargs="?", default=config.PORT_NAME, help=f"Serial port (default: {config.PORT_NAME})")
    parser.add_argument("baud", nargs="?", type=int, default=config.BAUD_RATE, help=f"Baud rate (default: {config.BAUD_RATE})")
    parser.add_argument("host", nargs="?", default=config.HOST_NAME, help=f"HTTP host (default: {config.HOST_NAME})")
    parser.add_argument("http_port", nargs="?", type=int, default=config.HTTP_PORT, help=f"HTTP port (default: {config.HTTP_PORT})")
    parser.add_argument("db_path", nargs="?", default=config.DB_PATH, help=f"SQLite database (default: {config.DB_PATH})")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level (default: %(default)s)")
    return parser


def apply_args(args: argparse.Namespace):
    config.PORT_NAME = args.port
    config.BAUD_RATE = args.baud
    config.HOST_NAME = args.host
    config.HTTP_PORT = args.http_port
    config.DB_PATH = args.db_path


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    apply_args(args)

    from sensorbridge.main import app

    LOGGER.info("HTTP server starting on %s:%d", config.HOST_NAME, config.HTTP_PORT)
    try:
        uvicorn.run(app, host=config.HOST_NAME, port=config.HTTP_PORT, log_level=args.log_level.lower())
    except Exception as e:
        LOGGER.error("Exception occurred: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
