"""Linux console keyboard, VT and font header utilities."""

__version__ = "0.1.0"