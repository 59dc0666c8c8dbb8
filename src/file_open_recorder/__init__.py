"""Attribute editing time to the file in focus."""

__version__ = "0.1.0"
