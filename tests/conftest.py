"""Pytest configuration and fixtures for test suite."""

from __future__ import annotations

import asyncio
from typing import AsyncGenerator, Optional

import pytest

from aranetscan.ble.adapter import DiscoveryEvent
from aranetscan.ble.uuids import (
    ARANET4_CURRENT_READINGS_UUID,
    ARANET4_SERVICE_UUID,
    FIRMWARE_REVISION_UUID,
    HARDWARE_REVISION_UUID,
    MANUFACTURER_NAME_UUID,
    MODEL_NUMBER_UUID,
    SERIAL_NUMBER_UUID,
    SOFTWARE_REVISION_UUID,
)
from aranetscan.errors import TransportError
from aranetscan.models import DeviceProperties

# co2=722, 30.0 degC, 84.8 hPa, 40 %, 100 %, GREEN, 60 s interval, 5 s ago
SAMPLE_PAYLOAD = bytes(
    [0xD2, 0x02, 0x58, 0x02, 0x50, 0x03, 0x28, 0x64, 0x01, 0x3C, 0x00, 0x05, 0x00]
)

FULL_INFO = {
    MODEL_NUMBER_UUID: b"Aranet4",
    SERIAL_NUMBER_UUID: b"12345",
    FIRMWARE_REVISION_UUID: b"v1.4.19",
    HARDWARE_REVISION_UUID: b"12",
    SOFTWARE_REVISION_UUID: b"v1.4.19",
    MANUFACTURER_NAME_UUID: b"SAF Tehnika",
}


class FakeDevice:
    """In-memory DeviceHandle."""

    def __init__(
        self,
        address: str,
        name: Optional[str] = "Aranet4 1A2B3",
        services: Optional[list[str]] = None,
        characteristics: Optional[dict[str, bytes]] = None,
        fail_on: Optional[str] = None,
        read_delay: float = 0.0,
        disconnect_delay: float = 0.0,
    ) -> None:
        self._address = address
        self.name = name
        self.services = [ARANET4_SERVICE_UUID] if services is None else services
        if characteristics is None:
            characteristics = {ARANET4_CURRENT_READINGS_UUID: SAMPLE_PAYLOAD, **FULL_INFO}
        self.characteristics = characteristics
        self.fail_on = fail_on
        self.read_delay = read_delay
        self.disconnect_delay = disconnect_delay
        self.connected = False
        self.connect_count = 0
        self.disconnect_count = 0
        self.reads: list[str] = []

    @property
    def address(self) -> str:
        return self._address

    async def properties(self) -> DeviceProperties:
        return DeviceProperties(name=self.name, service_uuids=list(self.services))

    async def connect(self) -> None:
        if self.fail_on == "connect":
            raise TransportError(f"Connecting to {self.address} failed")
        self.connected = True
        self.connect_count += 1

    async def disconnect(self) -> None:
        if self.disconnect_delay:
            await asyncio.sleep(self.disconnect_delay)
        self.connected = False
        self.disconnect_count += 1

    async def discover_characteristics(self) -> list[str]:
        return list(self.characteristics)

    async def read(self, uuid: str) -> bytes:
        if self.read_delay:
            await asyncio.sleep(self.read_delay)
        if self.fail_on == uuid:
            raise TransportError(f"Reading {uuid} from {self.address} failed")
        self.reads.append(uuid)
        return self.characteristics[uuid]


class FakeAdapter:
    """In-memory BleAdapter.

    Emits one discovery event per entry in `events`, each after `interval`
    seconds. With `endless` set the stream then blocks forever like a real
    radio with nothing more in range.
    """

    def __init__(
        self,
        devices: Optional[list[FakeDevice]] = None,
        events: Optional[list[str]] = None,
        interval: float = 0.0,
        endless: bool = True,
        start_error: Optional[Exception] = None,
        stop_error: Optional[Exception] = None,
    ) -> None:
        self.devices = {d.address: d for d in devices or []}
        self.events = list(self.devices) if events is None else events
        self.interval = interval
        self.endless = endless
        self.start_error = start_error
        self.stop_error = stop_error
        self.calls: list[str] = []
        self.service_filter: Optional[str] = None
        self.scanning = False
        self.emitted = 0

    async def start_scan(self, service_uuid: str) -> None:
        self.calls.append("start_scan")
        if self.start_error:
            raise self.start_error
        self.service_filter = service_uuid
        self.scanning = True

    async def stop_scan(self) -> None:
        self.calls.append("stop_scan")
        self.scanning = False
        if self.stop_error:
            raise self.stop_error

    async def discovery_events(self) -> AsyncGenerator[DiscoveryEvent, None]:
        for device_id in self.events:
            if self.interval:
                await asyncio.sleep(self.interval)
            self.emitted += 1
            yield DiscoveryEvent(device_id=device_id)
        if self.endless:
            await asyncio.Event().wait()

    async def resolve(self, device_id: str) -> FakeDevice:
        self.calls.append(f"resolve:{device_id}")
        return self.devices[device_id]


@pytest.fixture
def sample_payload() -> bytes:
    return SAMPLE_PAYLOAD


@pytest.fixture
def make_device():
    """Factory for FakeDevice with numbered addresses."""
    counter = iter(range(1, 1000))

    def _make(**kwargs) -> FakeDevice:
        n = next(counter)
        kwargs.setdefault("address", f"AA:BB:CC:DD:EE:{n:02X}")
        kwargs.setdefault("name", f"Aranet4 {n:05X}")
        return FakeDevice(**kwargs)

    return _make
