"""Shared pytest fixtures for immich deduplicator tests."""

from datetime import datetime

import pytest

from immich_deduplicator.core.exceptions import MediaLibraryError
from immich_deduplicator.core.models import Album, Asset, DuplicateGroup, ExifInfo

MUTATING_CALLS = {"add_asset_to_album", "create_stack", "delete_assets"}


class FakeMediaLibraryClient:
    """In-memory media library that records every call it receives."""

    def __init__(
        self,
        groups: list[DuplicateGroup] | None = None,
        albums: dict[str, list[Album]] | None = None,
    ):
        self.groups = groups or []
        self.albums = albums or {}
        self.failing_lookups: set[str] = set()
        self.failing_album_adds: set[str] = set()
        self.fail_stacks = False
        self.fail_deletes = False
        self.connection_error: Exception | None = None
        self.fetch_error: Exception | None = None
        self.calls: list[tuple] = []

    def __enter__(self) -> "FakeMediaLibraryClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.calls.append(("close",))

    def validate_connection(self) -> str:
        self.calls.append(("validate_connection",))
        if self.connection_error is not None:
            raise self.connection_error
        return "1.118.2"

    def fetch_duplicate_groups(self) -> list[DuplicateGroup]:
        self.calls.append(("fetch_duplicate_groups",))
        if self.fetch_error is not None:
            raise self.fetch_error
        return list(self.groups)

    def fetch_albums_containing(self, asset_id: str) -> list[Album]:
        self.calls.append(("fetch_albums_containing", asset_id))
        if asset_id in self.failing_lookups:
            raise MediaLibraryError(f"lookup failed for {asset_id}")
        return list(self.albums.get(asset_id, []))

    def add_asset_to_album(self, album_id: str, asset_id: str) -> bool:
        self.calls.append(("add_asset_to_album", album_id, asset_id))
        return album_id not in self.failing_album_adds

    def create_stack(self, asset_ids: list[str]) -> str | None:
        self.calls.append(("create_stack", list(asset_ids)))
        if self.fail_stacks:
            return None
        return f"stack-{len(self.calls)}"

    def delete_assets(self, asset_ids: list[str]) -> bool:
        self.calls.append(("delete_assets", list(asset_ids)))
        return not self.fail_deletes

    @property
    def mutating_calls(self) -> list[tuple]:
        """Calls that would have changed the library."""
        return [call for call in self.calls if call[0] in MUTATING_CALLS]

    def calls_named(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]


def build_asset(
    asset_id: str,
    filename: str,
    checksum: str = "checksum",
    taken_at: datetime = datetime(2023, 7, 25, 9, 43, 39),
    size: int | None = None,
    favorite: bool = False,
) -> Asset:
    """Create an asset with sensible defaults."""
    return Asset(
        id=asset_id,
        original_file_name=filename,
        checksum=checksum,
        file_created_at=taken_at,
        local_datetime=taken_at,
        is_favorite=favorite,
        exif_info=ExifInfo(file_size_in_byte=size) if size is not None else None,
    )


def build_group(duplicate_id: str, assets: list[Asset]) -> DuplicateGroup:
    """Create a duplicate group."""
    return DuplicateGroup(duplicate_id=duplicate_id, assets=assets)


def album(album_id: str) -> Album:
    """Create an album."""
    return Album(id=album_id, album_name=f"Album {album_id}")


@pytest.fixture
def make_asset():
    """Factory fixture building assets."""
    return build_asset


@pytest.fixture
def make_group():
    """Factory fixture building duplicate groups."""
    return build_group


@pytest.fixture
def make_album():
    """Factory fixture building albums."""
    return album


@pytest.fixture
def fake_client() -> FakeMediaLibraryClient:
    """Empty in-memory media library."""
    return FakeMediaLibraryClient()
