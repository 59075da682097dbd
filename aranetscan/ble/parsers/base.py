"""Base parser class for characteristic payloads."""

from abc import ABC, abstractmethod

from ...models import Data, DeviceProperties


class BaseParser(ABC):
    """Abstract base class for sensor payload parsers."""

    # Service a device must advertise for this parser to apply
    service_uuid: str
    # Characteristic holding the payload handled by parse()
    characteristic_uuid: str

    @abstractmethod
    def parse(self, payload: bytes) -> Data:
        """
        Decode a characteristic payload into a reading.

        Args:
            payload: Raw bytes read from characteristic_uuid

        Returns:
            Decoded Data

        Raises:
            DecodeError: If the payload is malformed
        """
        pass

    @abstractmethod
    def can_parse(self, properties: DeviceProperties) -> bool:
        """
        Check if this parser handles the advertised device.

        Args:
            properties: Advertised name and service UUIDs

        Returns:
            True if the device belongs to this sensor family
        """
        pass
