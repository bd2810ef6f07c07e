"""Interface of the media library consumed by the reconciliation engine."""

from typing import Protocol

from .models import Album, DuplicateGroup


class MediaLibraryClient(Protocol):
    """Operations the engine needs from the remote media library.

    Read operations raise ``MediaLibraryError`` when they fail. Mutating
    operations report failure through their return value.
    """

    def fetch_duplicate_groups(self) -> list[DuplicateGroup]:
        """Return every duplicate group known to the library."""
        ...

    def fetch_albums_containing(self, asset_id: str) -> list[Album]:
        """Return the albums that contain the asset."""
        ...

    def add_asset_to_album(self, album_id: str, asset_id: str) -> bool:
        """Add an asset to an album. Adding an asset already present is a no-op."""
        ...

    def create_stack(self, asset_ids: list[str]) -> str | None:
        """Stack the assets together, returning the stack id or None on failure."""
        ...

    def delete_assets(self, asset_ids: list[str]) -> bool:
        """Move the assets to the trash."""
        ...


class RecordSink(Protocol):
    """Protocol for consumers of processing records."""

    def __call__(self, record) -> None:
        """Called with each GroupActionRecord or UnchangedGroupRecord."""
        ...


class ProgressCallback(Protocol):
    """Protocol for progress callback functions during processing."""

    def __call__(self, current: int, total: int | None = None, message: str = "") -> None:
        """Called to report progress before each group is processed."""
        ...
