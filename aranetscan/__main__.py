"""Entry point for aranetscan: python -m aranetscan."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import yaml

from . import __version__
from .ble.adapter import BleakAdapter
from .ble.scanner import AranetScanner
from .config import OUTPUT_FORMATS, load_config
from .errors import ScanError
from .formatting import format_devices
from .models import AppConfig


def setup_logging(verbose: bool) -> None:
    """Configure logging.

    Logs go to stderr so stdout only carries the rendered results.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Reduce noise from libraries
    if not verbose:
        logging.getLogger("bleak").setLevel(logging.WARNING)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="aranetscan",
        description="Discover Aranet4 sensors over Bluetooth LE and print their readings",
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file",
    )

    parser.add_argument(
        "-n", "--max-devices",
        type=int,
        default=None,
        metavar="N",
        help="Stop as soon as N devices have been read",
    )

    parser.add_argument(
        "-t", "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Maximum time to scan (default: 10)",
    )

    parser.add_argument(
        "-a", "--adapter",
        default=None,
        help="Bluetooth adapter to use, e.g. hci0",
    )

    parser.add_argument(
        "-f", "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: yaml)",
    )

    parser.add_argument(
        "--skip-failed",
        action="store_true",
        help="Skip devices that fail to read instead of aborting the scan",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Apply command line flags on top of file configuration."""
    if args.max_devices is not None:
        if args.max_devices < 0:
            raise ValueError("--max-devices must be >= 0")
        config.scan.max_devices = args.max_devices
    if args.timeout is not None:
        if args.timeout < 0:
            raise ValueError("--timeout must be >= 0")
        config.scan.timeout = args.timeout
    if args.adapter:
        config.scan.adapter = args.adapter
    if args.format:
        config.output = args.format
    if args.skip_failed:
        config.scan.skip_failed_devices = True
    return config


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    logger = logging.getLogger(__name__)

    try:
        config = apply_overrides(load_config(args.config), args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Configuration error: %s", e)
        return 2

    scanner = AranetScanner(
        BleakAdapter(config.scan.adapter, connect_timeout=config.scan.connect_timeout),
        skip_failed_devices=config.scan.skip_failed_devices,
    )

    try:
        devices = asyncio.run(
            scanner.scan(max_devices=config.scan.max_devices, timeout=config.scan.timeout)
        )
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except ScanError as e:
        logger.error("Scan failed: %s", e)
        return 1

    print(format_devices(devices, config.output))
    return 0


if __name__ == "__main__":
    sys.exit(main())
