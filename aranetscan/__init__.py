"""Aranet4 CO2 sensor discovery over Bluetooth Low Energy."""

__version__ = "0.1.0"
