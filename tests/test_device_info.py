import pytest

from aranetscan.ble.device_info import collect_info, decode_info_string
from aranetscan.ble.uuids import (
    ARANET4_CURRENT_READINGS_UUID,
    FIRMWARE_REVISION_UUID,
    MODEL_NUMBER_UUID,
    SERIAL_NUMBER_UUID,
)
from aranetscan.errors import TransportError
from aranetscan.models import Info

from .conftest import FULL_INFO


def _reader(values: dict[str, bytes], reads: list[str] | None = None, fail: str | None = None):
    async def read(uuid: str) -> bytes:
        if uuid == fail:
            raise TransportError(f"Reading {uuid} failed")
        if reads is not None:
            reads.append(uuid)
        return values[uuid]

    return read


class TestCollectInfo:
    """Test Device Information collection."""

    @pytest.mark.asyncio
    async def test_all_fields(self):
        info = await collect_info(list(FULL_INFO), _reader(FULL_INFO))

        assert info == Info(
            model_number="Aranet4",
            serial_number="12345",
            firmware_revision="v1.4.19",
            hardware_revision="12",
            software_revision="v1.4.19",
            manufacturer_name="SAF Tehnika",
        )

    @pytest.mark.asyncio
    async def test_two_of_six(self):
        values = {MODEL_NUMBER_UUID: b"Aranet4", SERIAL_NUMBER_UUID: b"98765"}
        info = await collect_info(list(values), _reader(values))

        assert info.model_number == "Aranet4"
        assert info.serial_number == "98765"
        assert info.firmware_revision is None
        assert info.hardware_revision is None
        assert info.software_revision is None
        assert info.manufacturer_name is None

    @pytest.mark.asyncio
    async def test_none_exposed(self):
        assert await collect_info([], _reader({})) == Info()

    @pytest.mark.asyncio
    async def test_unknown_characteristics_ignored(self):
        values = {
            ARANET4_CURRENT_READINGS_UUID: b"\x00" * 13,
            "0000ffff-0000-1000-8000-00805f9b34fb": b"vendor",
            MODEL_NUMBER_UUID: b"Aranet4",
        }
        reads: list[str] = []
        info = await collect_info(list(values), _reader(values, reads))

        assert info == Info(model_number="Aranet4")
        assert reads == [MODEL_NUMBER_UUID]

    @pytest.mark.asyncio
    async def test_short_uuid_recognised(self):
        values = {"2a26": b"v1.2.0"}
        info = await collect_info(list(values), _reader(values))

        assert info.firmware_revision == "v1.2.0"

    @pytest.mark.asyncio
    async def test_duplicate_characteristic_read_once(self):
        values = {MODEL_NUMBER_UUID: b"Aranet4"}
        reads: list[str] = []
        await collect_info([MODEL_NUMBER_UUID, MODEL_NUMBER_UUID], _reader(values, reads))

        assert reads == [MODEL_NUMBER_UUID]

    @pytest.mark.asyncio
    async def test_read_failure_propagates(self):
        with pytest.raises(TransportError):
            await collect_info(list(FULL_INFO), _reader(FULL_INFO, fail=FIRMWARE_REVISION_UUID))


class TestDecodeInfoString:
    """Test lossy decoding of info strings."""

    def test_plain(self):
        assert decode_info_string(b"SAF Tehnika") == "SAF Tehnika"

    def test_invalid_utf8_replaced(self):
        assert decode_info_string(b"v1\xff") == "v1�"

    def test_nul_padding_stripped(self):
        assert decode_info_string(b"12345\x00\x00") == "12345"
