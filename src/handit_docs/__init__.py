"""Handit.ai documentation site server."""

__version__ = "0.1.0"
