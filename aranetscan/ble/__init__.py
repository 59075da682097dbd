"""BLE discovery and readout module."""

from .adapter import BleAdapter, BleakAdapter, DeviceHandle, DiscoveryEvent
from .scanner import AranetScanner, get_devices

__all__ = [
    "AranetScanner",
    "BleAdapter",
    "BleakAdapter",
    "DeviceHandle",
    "DiscoveryEvent",
    "get_devices",
]
