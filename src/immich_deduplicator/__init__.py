"""Resolve duplicate asset groups reported by an Immich server."""

__version__ = "0.1.0"
