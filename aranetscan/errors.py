"""Exceptions raised while scanning for and reading Aranet4 sensors."""


class ScanError(Exception):
    """Base exception for a failed scan."""

    pass


class AdapterUnavailableError(ScanError):
    """No usable Bluetooth adapter is present."""

    pass


class TransportError(ScanError):
    """Scan start/stop, connect or characteristic read failed."""

    pass


class DecodeError(ScanError):
    """Characteristic payload could not be decoded."""

    pass


class TruncatedPayloadError(DecodeError):
    """Payload is shorter than the fixed record length."""

    def __init__(self, length: int, expected: int) -> None:
        super().__init__(f"Payload too short: {length} bytes, expected {expected}")
        self.length = length
        self.expected = expected


class InvalidStatusError(DecodeError):
    """Status byte is not a known alert level."""

    def __init__(self, value: int) -> None:
        super().__init__(f"Invalid status byte: {value}")
        self.value = value


class MissingPropertyError(ScanError):
    """A device property required to build a record is absent."""

    pass


class MissingCharacteristicError(MissingPropertyError):
    """A device advertising the sensor service does not expose a required characteristic."""

    def __init__(self, address: str, uuid: str) -> None:
        super().__init__(f"{address} does not expose characteristic {uuid}")
        self.address = address
        self.uuid = uuid
