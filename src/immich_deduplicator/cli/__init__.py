"""Command line interface for immich deduplicator."""
