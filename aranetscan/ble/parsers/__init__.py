"""Characteristic payload parsers."""

from .aranet import AranetParser, decode_current_readings
from .base import BaseParser

__all__ = ["AranetParser", "BaseParser", "decode_current_readings"]
