"""bren - bulk rename files in a directory tree."""

__version__ = "0.5.0"
