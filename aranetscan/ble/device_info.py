"""Device Information service reader."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Iterable

from ..models import Info
from .uuids import DEVICE_INFO_FIELDS, normalize_uuid

logger = logging.getLogger(__name__)

ReadFn = Callable[[str], Awaitable[bytes]]


def decode_info_string(payload: bytes) -> str:
    """Decode a Device Information string, replacing invalid UTF-8."""
    return bytes(payload).decode("utf-8", errors="replace").rstrip("\x00")


async def collect_info(characteristics: Iterable[str], read: ReadFn) -> Info:
    """Read the Device Information characteristics a device exposes.

    Unrecognised characteristics are ignored and recognised ones that are
    not exposed stay None. Read errors propagate to the caller.
    """
    fields: dict[str, str] = {}

    for uuid in characteristics:
        field_name = DEVICE_INFO_FIELDS.get(normalize_uuid(uuid))
        if field_name is None or field_name in fields:
            continue

        fields[field_name] = decode_info_string(await read(uuid))
        logger.debug("Read %s: %s", field_name, fields[field_name])

    return Info(**fields)
