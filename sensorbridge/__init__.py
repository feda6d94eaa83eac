"""Serial sensor device to HTTP bridge."""

__version__ = "0.1.0"
