"""Skyward Settlers - a turn-based rooftop settlement survival simulation."""

__version__ = "0.1.0"
