"""Data models for aranetscan."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import IntEnum
from typing import Optional

from .errors import InvalidStatusError


class Status(IntEnum):
    """Alert level shown on the sensor display."""

    GREEN = 1
    AMBER = 2
    RED = 3

    @classmethod
    def from_byte(cls, value: int) -> Status:
        """Map a wire byte to a Status, rejecting anything outside 1..3."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidStatusError(value) from None


@dataclass(frozen=True)
class Data:
    """A single point-in-time reading from the current readings characteristic."""

    co2: int
    temperature: float
    pressure: float
    humidity: int
    battery: int
    status: Status
    interval: timedelta
    ago: timedelta


@dataclass(frozen=True)
class Info:
    """Standard Device Information fields. None means not exposed by the device."""

    model_number: Optional[str] = None
    serial_number: Optional[str] = None
    firmware_revision: Optional[str] = None
    hardware_revision: Optional[str] = None
    software_revision: Optional[str] = None
    manufacturer_name: Optional[str] = None


@dataclass(frozen=True)
class Device:
    """One discovered sensor with its reading and device information."""

    name: str
    address: str
    data: Data
    info: Info


@dataclass
class DeviceProperties:
    """What a device advertises before any connection is made."""

    name: Optional[str] = None
    service_uuids: list[str] = field(default_factory=list)


@dataclass
class ScanConfig:
    """Scan parameters."""

    timeout: float = 10.0
    max_devices: Optional[int] = None
    adapter: Optional[str] = None
    connect_timeout: float = 10.0
    skip_failed_devices: bool = False


@dataclass
class AppConfig:
    """Application configuration."""

    scan: ScanConfig = field(default_factory=ScanConfig)
    output: str = "yaml"
