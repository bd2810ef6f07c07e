"""Album membership reconciliation for assets being removed."""

import logging

from .interfaces import MediaLibraryClient
from .models import Album, Asset

logger = logging.getLogger(__name__)


class AlbumReconciler:
    """Carries album memberships of deleted assets over to the keeper."""

    def __init__(self, client: MediaLibraryClient):
        self.client = client

    def fetch_memberships(self, assets: list[Asset]) -> dict[str, list[Album]]:
        """
        Look up the albums of each asset, one request per asset.

        Args:
            assets: Assets to look up

        Returns:
            Dictionary mapping asset ids to the albums containing them
        """
        memberships: dict[str, list[Album]] = {}
        for asset in assets:
            memberships[asset.id] = self.client.fetch_albums_containing(asset.id)
        return memberships

    def albums_to_add(
        self,
        keeper: Asset,
        to_delete: list[Asset],
        memberships: dict[str, list[Album]] | None = None,
    ) -> list[str]:
        """
        Compute the albums the keeper must join before the others are deleted.

        Args:
            keeper: Asset being retained
            to_delete: Assets being removed
            memberships: Already fetched memberships covering keeper and to_delete

        Returns:
            Album ids in first-seen order

        With known memberships the keeper's current albums are excluded.
        Otherwise only the deleted assets are looked up and no exclusion is
        applied.
        """
        if memberships is None:
            memberships = self.fetch_memberships(to_delete)
            exclude: set[str] = set()
        else:
            exclude = {album.id for album in memberships.get(keeper.id, [])}

        album_ids: dict[str, None] = {}
        for asset in to_delete:
            for album in memberships.get(asset.id, []):
                if album.id not in exclude:
                    album_ids[album.id] = None

        return list(album_ids)

    def add_keeper(self, keeper: Asset, album_ids: list[str]) -> list[str]:
        """
        Add the keeper to each album.

        Args:
            keeper: Asset being retained
            album_ids: Albums to add it to

        Returns:
            Album ids that accepted the keeper
        """
        added = []
        for album_id in album_ids:
            if self.client.add_asset_to_album(album_id, keeper.id):
                added.append(album_id)
            else:
                logger.warning(f"Failed to add asset {keeper.id} to album {album_id}")
        return added
