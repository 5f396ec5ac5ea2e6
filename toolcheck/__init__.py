"""toolcheck — concurrent health checks for a developer toolchain."""

__version__ = "0.1.0"
