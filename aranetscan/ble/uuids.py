"""GATT identifiers used by Aranet4 sensors."""

from __future__ import annotations

from uuid import UUID

# Bluetooth SIG base UUID, used to expand 16-bit short identifiers
_BASE_UUID_SUFFIX = "-0000-1000-8000-00805f9b34fb"

ARANET4_SERVICE_UUID = "0000fce0-0000-1000-8000-00805f9b34fb"

# Current readings: 13 bytes, see parsers.aranet
ARANET4_CURRENT_READINGS_UUID = "f0cd3001-95da-4f4b-9ac8-aa55d312af0c"

# Device Information service (0x180A) characteristics
MODEL_NUMBER_UUID = "00002a24-0000-1000-8000-00805f9b34fb"
SERIAL_NUMBER_UUID = "00002a25-0000-1000-8000-00805f9b34fb"
FIRMWARE_REVISION_UUID = "00002a26-0000-1000-8000-00805f9b34fb"
HARDWARE_REVISION_UUID = "00002a27-0000-1000-8000-00805f9b34fb"
SOFTWARE_REVISION_UUID = "00002a28-0000-1000-8000-00805f9b34fb"
MANUFACTURER_NAME_UUID = "00002a29-0000-1000-8000-00805f9b34fb"

# Characteristic UUID -> Info field name
DEVICE_INFO_FIELDS: dict[str, str] = {
    MODEL_NUMBER_UUID: "model_number",
    SERIAL_NUMBER_UUID: "serial_number",
    FIRMWARE_REVISION_UUID: "firmware_revision",
    HARDWARE_REVISION_UUID: "hardware_revision",
    SOFTWARE_REVISION_UUID: "software_revision",
    MANUFACTURER_NAME_UUID: "manufacturer_name",
}


def normalize_uuid(value: str | UUID) -> str:
    """Return the lower-case 128-bit string form of a UUID.

    Accepts UUID objects, full string UUIDs and 16/32-bit short forms
    such as "2a24" or "0x2A24".
    """
    if isinstance(value, UUID):
        return str(value)

    text = value.strip().lower()
    if text.startswith("0x"):
        text = text[2:]
    if len(text) == 4:
        return f"0000{text}{_BASE_UUID_SUFFIX}"
    if len(text) == 8:
        return f"{text}{_BASE_UUID_SUFFIX}"
    return str(UUID(text))
