"""Configuration loading from YAML."""

import logging
from pathlib import Path
from typing import Optional

import yaml

from .models import AppConfig, ScanConfig

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("yaml", "json", "text")


def _positive_float(value: object, key: str, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value: %s", key, value)
        return default
    if number < 0:
        logger.warning("Negative %s value: %s", key, value)
        return default
    return number


def _load_scan_config(data: dict) -> ScanConfig:
    defaults = ScanConfig()
    scan = ScanConfig()

    if "timeout" in data:
        scan.timeout = _positive_float(data["timeout"], "timeout", defaults.timeout)

    if "connect_timeout" in data:
        scan.connect_timeout = _positive_float(
            data["connect_timeout"], "connect_timeout", defaults.connect_timeout
        )

    max_devices = data.get("max_devices")
    if max_devices is not None:
        try:
            max_devices = int(max_devices)
            if max_devices < 0:
                raise ValueError(max_devices)
            scan.max_devices = max_devices
        except (TypeError, ValueError):
            logger.warning("Invalid max_devices value: %s", data["max_devices"])

    adapter = data.get("adapter")
    if adapter is not None:
        scan.adapter = str(adapter)

    skip = data.get("skip_failed_devices")
    if skip is not None:
        if isinstance(skip, bool):
            scan.skip_failed_devices = skip
        else:
            logger.warning("Invalid skip_failed_devices value: %s", skip)

    return scan


def load_config(config_path: Optional[Path]) -> AppConfig:
    """Load configuration from a YAML file.

    A missing path (None) gives the defaults; a path that does not exist
    is an error.
    """
    if config_path is None:
        logger.debug("No configuration file, using defaults")
        return AppConfig()

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration must be a mapping: {config_path}")

    scan_data = data.get("scan") or {}
    if not isinstance(scan_data, dict):
        logger.warning("Invalid scan configuration: %s", scan_data)
        scan_data = {}

    output = data.get("output", "yaml")
    if output not in OUTPUT_FORMATS:
        logger.warning("Invalid output format: %s", output)
        output = "yaml"

    config = AppConfig(scan=_load_scan_config(scan_data), output=output)
    logger.info(
        "Loaded configuration: timeout %.1fs, max_devices %s",
        config.scan.timeout,
        config.scan.max_devices,
    )
    return config
