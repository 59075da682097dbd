"""BLE transport interface and its Bleak implementation."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import AsyncGenerator, Iterator, Optional, Protocol

from bleak import BleakClient, BleakScanner
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData
from bleak.exc import BleakBluetoothNotAvailableError, BleakError

from ..errors import AdapterUnavailableError, TransportError
from ..models import DeviceProperties
from .uuids import normalize_uuid

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class DiscoveryEvent:
    """A device was observed advertising."""

    device_id: str


class DeviceHandle(Protocol):
    """A discovered device that can be connected to and read."""

    @property
    def address(self) -> str: ...

    async def properties(self) -> DeviceProperties: ...

    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def discover_characteristics(self) -> list[str]: ...

    async def read(self, uuid: str) -> bytes: ...


class BleAdapter(Protocol):
    """A Bluetooth adapter able to run one discovery session at a time."""

    async def start_scan(self, service_uuid: str) -> None: ...

    async def stop_scan(self) -> None: ...

    def discovery_events(self) -> AsyncGenerator[DiscoveryEvent, None]: ...

    async def resolve(self, device_id: str) -> DeviceHandle: ...


@contextmanager
def _transport_errors(action: str) -> Iterator[None]:
    """Translate Bleak and OS level failures into TransportError."""
    try:
        yield
    except BleakBluetoothNotAvailableError as e:
        raise AdapterUnavailableError(f"Bluetooth not available: {e}") from e
    except (BleakError, OSError, TimeoutError) as e:
        raise TransportError(f"{action} failed: {e}") from e


class BleakDeviceHandle:
    """DeviceHandle backed by a BleakClient."""

    def __init__(
        self,
        device: BLEDevice,
        advertisement_data: AdvertisementData,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
    ) -> None:
        self._device = device
        self._advertisement_data = advertisement_data
        self._client = BleakClient(device, timeout=connect_timeout)

    @property
    def address(self) -> str:
        return self._device.address

    async def properties(self) -> DeviceProperties:
        return DeviceProperties(
            name=self._advertisement_data.local_name or self._device.name,
            service_uuids=[normalize_uuid(u) for u in self._advertisement_data.service_uuids],
        )

    async def connect(self) -> None:
        with _transport_errors(f"Connecting to {self.address}"):
            await self._client.connect()
        logger.debug("Connected to %s", self.address)

    async def disconnect(self) -> None:
        with _transport_errors(f"Disconnecting from {self.address}"):
            await self._client.disconnect()
        logger.debug("Disconnected from %s", self.address)

    async def discover_characteristics(self) -> list[str]:
        with _transport_errors(f"Service discovery on {self.address}"):
            services = self._client.services
            return [
                normalize_uuid(characteristic.uuid)
                for service in services
                for characteristic in service.characteristics
            ]

    async def read(self, uuid: str) -> bytes:
        with _transport_errors(f"Reading {uuid} from {self.address}"):
            return bytes(await self._client.read_gatt_char(uuid))


class BleakAdapter:
    """BleAdapter backed by BleakScanner.

    Keeps the most recent advertisement per address so resolve() does
    not need another round trip to the radio.
    """

    def __init__(
        self,
        adapter_name: Optional[str] = None,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
    ) -> None:
        self._adapter_name = adapter_name
        self._connect_timeout = connect_timeout
        self._scanner: Optional[BleakScanner] = None
        self._seen: dict[str, tuple[BLEDevice, AdvertisementData]] = {}

    async def start_scan(self, service_uuid: str) -> None:
        if self._scanner is not None:
            raise TransportError("Scan already in progress")

        kwargs = {}
        if self._adapter_name:
            kwargs["adapter"] = self._adapter_name

        self._seen.clear()
        with _transport_errors("Starting scan"):
            scanner = BleakScanner(service_uuids=[service_uuid], **kwargs)
            await scanner.start()
        self._scanner = scanner
        logger.debug("Discovery started on %s", self._adapter_name or "default adapter")

    async def stop_scan(self) -> None:
        if self._scanner is None:
            return

        scanner, self._scanner = self._scanner, None
        with _transport_errors("Stopping scan"):
            await scanner.stop()
        logger.debug("Discovery stopped")

    async def discovery_events(self) -> AsyncGenerator[DiscoveryEvent, None]:
        if self._scanner is None:
            raise TransportError("Scan not started")

        async for device, advertisement_data in self._scanner.advertisement_data():
            self._seen[device.address] = (device, advertisement_data)
            yield DiscoveryEvent(device_id=device.address)

    async def resolve(self, device_id: str) -> BleakDeviceHandle:
        try:
            device, advertisement_data = self._seen[device_id]
        except KeyError:
            raise TransportError(f"Unknown device {device_id}") from None
        return BleakDeviceHandle(device, advertisement_data, self._connect_timeout)
