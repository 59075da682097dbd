"""Rendering of scan results for the command line."""

from __future__ import annotations

import json
from dataclasses import asdict, fields
from datetime import timedelta
from typing import Any

import yaml

from .models import Device, Info


def format_age(seconds: float) -> str:
    """Format age in seconds to short human-readable string (e.g. '5min', '2h')."""
    if seconds < 60:
        return f"{int(seconds)}s"
    elif seconds < 3600:
        return f"{int(seconds / 60)}min"
    else:
        return f"{int(seconds / 3600)}h"


def _plain(value: Any) -> Any:
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


def device_to_dict(device: Device) -> dict[str, Any]:
    """Convert a Device to plain types.

    Durations become whole seconds and the status its name; all other
    fields keep their units (ppm, degC, hPa, %).
    """
    result = _plain(asdict(device))
    result["data"]["status"] = device.data.status.name
    return result


def _format_text(devices: list[Device]) -> str:
    if not devices:
        return "No devices found"

    blocks = []
    for device in devices:
        data = device.data
        lines = [
            f"{device.name} [{device.address}]",
            f"  CO2:         {data.co2} ppm ({data.status.name})",
            f"  Temperature: {data.temperature:.1f}°C",
            f"  Pressure:    {data.pressure:.1f} hPa",
            f"  Humidity:    {data.humidity}%",
            f"  Battery:     {data.battery}%",
            f"  Updated:     {format_age(data.ago.total_seconds())} ago "
            f"(every {format_age(data.interval.total_seconds())})",
        ]
        for f in fields(Info):
            value = getattr(device.info, f.name)
            if value is not None:
                label = f.name.replace("_", " ").capitalize() + ":"
                lines.append(f"  {label:<19}{value}")
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks)


def format_devices(devices: list[Device], fmt: str = "yaml") -> str:
    """Render devices as yaml, json or text."""
    if fmt == "text":
        return _format_text(devices)

    payload = [device_to_dict(d) for d in devices]
    if fmt == "json":
        return json.dumps(payload, indent=2, ensure_ascii=False)
    if fmt == "yaml":
        return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True).rstrip("\n")

    raise ValueError(f"Unknown output format: {fmt}")
