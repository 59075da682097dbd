"""Aranet4 current readings parser."""

import logging
import struct
from datetime import timedelta

from ...errors import TruncatedPayloadError
from ...models import Data, DeviceProperties, Status
from ..uuids import ARANET4_CURRENT_READINGS_UUID, ARANET4_SERVICE_UUID, normalize_uuid
from .base import BaseParser

logger = logging.getLogger(__name__)

# co2, temperature, pressure, humidity, battery, status, interval, ago
_CURRENT_READINGS = struct.Struct("<HHHBBBHH")
CURRENT_READINGS_LENGTH = _CURRENT_READINGS.size


def decode_current_readings(payload: bytes) -> Data:
    """
    Decode the Aranet4 current readings characteristic.

    Format (little-endian):
    - Bytes 0-1: CO2 (ppm)
    - Bytes 2-3: Temperature (1/20 degC per unit)
    - Bytes 4-5: Pressure (1/10 hPa per unit)
    - Byte 6: Humidity (%)
    - Byte 7: Battery (%)
    - Byte 8: Status (1 green, 2 amber, 3 red)
    - Bytes 9-10: Measurement interval (s)
    - Bytes 11-12: Seconds since last measurement

    Raises:
        TruncatedPayloadError: Fewer than 13 bytes
        InvalidStatusError: Status byte outside 1..3
    """
    if len(payload) < CURRENT_READINGS_LENGTH:
        raise TruncatedPayloadError(len(payload), CURRENT_READINGS_LENGTH)

    if len(payload) > CURRENT_READINGS_LENGTH:
        logger.debug(
            "Ignoring %d trailing bytes in current readings",
            len(payload) - CURRENT_READINGS_LENGTH,
        )

    (
        co2,
        temperature_raw,
        pressure_raw,
        humidity,
        battery,
        status_raw,
        interval_s,
        ago_s,
    ) = _CURRENT_READINGS.unpack_from(payload, 0)

    return Data(
        co2=co2,
        temperature=temperature_raw / 20.0,
        pressure=pressure_raw / 10.0,
        humidity=humidity,
        battery=battery,
        status=Status.from_byte(status_raw),
        interval=timedelta(seconds=interval_s),
        ago=timedelta(seconds=ago_s),
    )


class AranetParser(BaseParser):
    """Parser for Aranet4 devices."""

    service_uuid = ARANET4_SERVICE_UUID
    characteristic_uuid = ARANET4_CURRENT_READINGS_UUID

    def can_parse(self, properties: DeviceProperties) -> bool:
        """Check that the Aranet4 service is advertised.

        The scan filter is only advisory on some platforms, so every
        discovered device is checked here.
        """
        return any(
            normalize_uuid(uuid) == self.service_uuid
            for uuid in properties.service_uuids
        )

    def parse(self, payload: bytes) -> Data:
        """Parse current readings payload."""
        return decode_current_readings(bytes(payload))
