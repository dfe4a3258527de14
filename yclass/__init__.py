"""Lay out classes over process memory, search it and generate structure definitions."""

__version__ = "0.1.0"