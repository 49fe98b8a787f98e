"""Building blocks for a small HTTP proxy."""

__version__ = "0.1.0"