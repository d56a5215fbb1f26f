"""Stage platform-specific native libraries from bundled resources onto disk."""

__version__ = "0.1.0"
