"""Time-bounded discovery and readout of Aranet4 sensors."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncGenerator, Optional

from ..errors import (
    AdapterUnavailableError,
    MissingCharacteristicError,
    MissingPropertyError,
    ScanError,
    TransportError,
)
from ..models import Device, DeviceProperties
from .adapter import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    BleakAdapter,
    BleAdapter,
    DeviceHandle,
    DiscoveryEvent,
)
from .device_info import collect_info
from .parsers import AranetParser, BaseParser
from .uuids import normalize_uuid

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


async def _next_event(events: AsyncGenerator[DiscoveryEvent, None]) -> Optional[DiscoveryEvent]:
    return await anext(events, None)


class AranetScanner:
    """Discovers sensors, connects to each and reads its current state.

    One scan owns the adapter's discovery session for its whole duration
    and always stops it before returning.
    """

    # Timeout for each stop/disconnect cleanup step - don't let it hang forever
    STOP_TIMEOUT_SECONDS = 2

    def __init__(
        self,
        adapter: BleAdapter,
        parser: Optional[BaseParser] = None,
        skip_failed_devices: bool = False,
    ) -> None:
        self._adapter = adapter
        self._parser = parser or AranetParser()
        self._skip_failed_devices = skip_failed_devices

    async def scan(
        self,
        max_devices: Optional[int] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> list[Device]:
        """Scan for sensors until timeout or until max_devices are read.

        Reaching the timeout or the device cap is a normal end of the scan
        and returns whatever was collected. Transport and decode failures
        abort the scan unless skip_failed_devices is set.

        Cleanup after the deadline (disconnecting a half-read device, then
        stopping discovery) may add up to 2 * STOP_TIMEOUT_SECONDS.
        """
        if max_devices is not None and max_devices < 0:
            raise ValueError(f"max_devices must be >= 0, got {max_devices}")
        if timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {timeout}")

        devices: list[Device] = []
        if max_devices == 0:
            return devices

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        logger.info(
            "Scanning for %s devices for up to %.1fs",
            max_devices if max_devices is not None else "all",
            timeout,
        )
        await self._adapter.start_scan(self._parser.service_uuid)

        completed = False
        try:
            await self._collect(devices, max_devices, deadline)
            completed = True
        finally:
            await self._stop_scan(raise_errors=completed)

        logger.info("Scan finished with %d devices", len(devices))
        return devices

    async def _collect(
        self,
        devices: list[Device],
        max_devices: Optional[int],
        deadline: float,
    ) -> None:
        """Consume discovery events into devices until a stop condition."""
        loop = asyncio.get_running_loop()
        done: set[str] = set()
        events = self._adapter.discovery_events()

        try:
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    logger.debug("Scan deadline reached")
                    return

                try:
                    async with asyncio.timeout_at(deadline) as cm:
                        event = await _next_event(events)
                except TimeoutError as e:
                    if not cm.expired():
                        raise TransportError(f"Waiting for discovery events failed: {e}") from e
                    logger.debug("No more discovery events before deadline")
                    return

                if event is None:
                    logger.debug("Discovery event stream ended")
                    return

                if event.device_id in done:
                    continue

                try:
                    try:
                        async with asyncio.timeout_at(deadline) as cm:
                            device = await self._handle_event(event)
                    except TimeoutError as e:
                        # Only the scan deadline ends the scan; a transport timeout is a failure
                        if not cm.expired():
                            raise TransportError(f"Reading {event.device_id} timed out: {e}") from e
                        logger.info("Deadline reached while reading %s, dropping it", event.device_id)
                        return
                except AdapterUnavailableError:
                    raise
                except ScanError as e:
                    if not self._skip_failed_devices:
                        raise
                    logger.warning("Skipping %s: %s", event.device_id, e)
                    done.add(event.device_id)
                    continue

                if device is None:
                    continue

                done.add(event.device_id)
                devices.append(device)
                logger.info(
                    "Found %s (%s): %d ppm, %.1f°C",
                    device.name,
                    device.address,
                    device.data.co2,
                    device.data.temperature,
                )

                if max_devices is not None and len(devices) >= max_devices:
                    logger.debug("Reached device cap of %d", max_devices)
                    return
        finally:
            await events.aclose()

    async def _handle_event(self, event: DiscoveryEvent) -> Optional[Device]:
        """Resolve a discovery event and read the device if it is a sensor."""
        handle = await self._adapter.resolve(event.device_id)
        properties = await handle.properties()

        if not self._parser.can_parse(properties):
            logger.debug(
                "Ignoring %s: sensor service not advertised (%s)",
                event.device_id,
                ", ".join(properties.service_uuids) or "no services",
            )
            return None

        return await self._read_device(handle)

    async def _read_device(self, handle: DeviceHandle) -> Device:
        """Connect to a device and assemble its record."""
        await handle.connect()
        try:
            characteristics = await handle.discover_characteristics()
            properties: DeviceProperties = await handle.properties()
            if not properties.name:
                raise MissingPropertyError(f"{handle.address} has no advertised name")

            data_uuid = self._parser.characteristic_uuid
            if data_uuid not in {normalize_uuid(c) for c in characteristics}:
                raise MissingCharacteristicError(handle.address, data_uuid)

            data = self._parser.parse(await handle.read(data_uuid))
            info = await collect_info(characteristics, handle.read)
        finally:
            await self._disconnect_safe(handle)

        return Device(name=properties.name, address=handle.address, data=data, info=info)

    async def _disconnect_safe(self, handle: DeviceHandle) -> None:
        """Disconnect with timeout protection, logging failures."""
        try:
            await asyncio.wait_for(handle.disconnect(), timeout=self.STOP_TIMEOUT_SECONDS)
        except TimeoutError:
            logger.warning("Disconnect from %s timed out after %.1fs", handle.address, self.STOP_TIMEOUT_SECONDS)
        except ScanError as e:
            logger.warning("Error disconnecting from %s: %s", handle.address, e)

    async def _stop_scan(self, raise_errors: bool) -> None:
        """Stop discovery.

        Failures are raised on a normal exit and only logged when another
        error is already propagating.
        """
        try:
            await asyncio.wait_for(self._adapter.stop_scan(), timeout=self.STOP_TIMEOUT_SECONDS)
        except (ScanError, TimeoutError) as e:
            if raise_errors:
                if isinstance(e, TimeoutError):
                    raise TransportError(
                        f"Stopping scan timed out after {self.STOP_TIMEOUT_SECONDS}s"
                    ) from e
                raise
            logger.warning("Error stopping scan: %s", e)


async def get_devices(
    max_devices: Optional[int] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    adapter_name: Optional[str] = None,
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
    skip_failed_devices: bool = False,
) -> list[Device]:
    """Scan for Aranet4 devices on a Bleak adapter.

    Args:
        max_devices: Stop as soon as this many devices have been read
        timeout: Seconds to wait for devices before returning
        adapter_name: Bluetooth adapter to use (e.g. "hci0"), default if None
        connect_timeout: Seconds to wait for each connection
        skip_failed_devices: Skip devices that fail instead of aborting

    Returns:
        Devices read before the timeout or the cap was reached
    """
    adapter = BleakAdapter(adapter_name, connect_timeout=connect_timeout)
    scanner = AranetScanner(adapter, skip_failed_devices=skip_failed_devices)
    return await scanner.scan(max_devices=max_devices, timeout=timeout)
