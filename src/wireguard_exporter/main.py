#!/usr/bin/env python3
"""
WireGuard Exporter - Main Entry Point

Runs ``wg show all dump`` on every scrape and exposes peer counters
in the Prometheus text format on /metrics.
"""
import argparse
import asyncio
import logging
import signal
from typing import List, Optional

from . import __version__
from .config import ExporterConfig, load_config

logger = logging.getLogger("wireguard-exporter")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="prometheus-wireguard-exporter",
        description="Prometheus exporter for WireGuard",
    )
    parser.add_argument("-c", "--config", help="JSON config file (default: $WG_EXPORTER_CONFIG or config.json)")
    parser.add_argument("-l", "--listen-address", help="address to listen on")
    parser.add_argument("-p", "--port", type=int, help="port to listen on")
    parser.add_argument(
        "-n", "--peer-config", action="append", default=[],
        help="WireGuard config file with friendly_name comments (repeatable)",
    )
    parser.add_argument(
        "-i", "--interface", action="append", default=[],
        help="only export this interface (repeatable)",
    )
    parser.add_argument("-a", "--prepend-sudo", action="store_true", help="run wg through sudo")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ExporterConfig:
    """Load configuration and apply command-line overrides."""
    config = load_config(args.config)

    if args.listen_address:
        config.api_host = args.listen_address
    if args.port is not None:
        config.api_port = args.port
    if args.peer_config:
        config.peer_config_files = args.peer_config
    if args.interface:
        config.interfaces = args.interface
    if args.prepend_sudo:
        config.prepend_sudo = True
    if args.verbose:
        config.verbose = True

    return config


async def main(config: ExporterConfig):
    """Main entry point."""
    from .api.server import run_server

    logger.info(f"WireGuard exporter {__version__} starting...")
    logger.info(f"Interfaces: {', '.join(config.interfaces) or 'all'}")
    if config.peer_config_files:
        logger.info(f"Peer names from: {', '.join(config.peer_config_files)}")

    # Handle shutdown signals
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def shutdown_handler():
        logger.info("Shutdown signal received")
        stop_event.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, shutdown_handler)

    await run_server(config, stop_event)

    logger.info("WireGuard exporter stopped")


def cli(argv: Optional[List[str]] = None):
    config = build_config(parse_args(argv))

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    asyncio.run(main(config))


if __name__ == "__main__":
    cli()
