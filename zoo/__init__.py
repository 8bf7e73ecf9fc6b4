"""Crazy Zoo - an enclosure event and feeding simulation."""

__version__ = "0.1.0"
