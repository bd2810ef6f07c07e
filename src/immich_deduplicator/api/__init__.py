"""Immich API access for immich deduplicator."""

from .client import ImmichApiClient

__all__ = [
    "ImmichApiClient",
]
