"""Decoder for raw infrared signal dumps."""

__version__ = "0.1.0"
