"""Keeper selection logic for duplicate groups."""

import logging
from dataclasses import dataclass

from .models import Album, Asset, DuplicateCategory

logger = logging.getLogger(__name__)


@dataclass
class KeeperSelection:
    """Result of keeper selection for a duplicate group."""

    keeper: Asset
    to_delete: list[Asset]

    @property
    def delete_ids(self) -> list[str]:
        """Identifiers of the assets to delete."""
        return [asset.id for asset in self.to_delete]


class KeeperSelector:
    """Chooses which asset of a duplicate group to retain."""

    def select(
        self,
        assets: list[Asset],
        category: DuplicateCategory,
        memberships: dict[str, list[Album]] | None = None,
    ) -> KeeperSelection:
        """
        Select the keeper and the assets to delete.

        Args:
            assets: Assets of the group in discovery order
            category: Category of the group, must be a delete category
            memberships: Albums per asset id, required for identical content

        Returns:
            KeeperSelection with the keeper and the remaining assets in discovery order

        Raises:
            ValueError: If fewer than two assets are given, the category has no
                keeper, or album memberships are missing for identical content

        Identical content keeps the asset in the most albums. Same name and
        same time groups keep the largest file. Favorites win ties, then the
        earliest asset in discovery order.
        """
        if len(assets) < 2:
            raise ValueError(f"Keeper selection needs at least 2 assets, got {len(assets)}")

        if category == DuplicateCategory.IDENTICAL_CONTENT:
            if memberships is None:
                raise ValueError("Album memberships are required for identical content groups")

            def primary(asset: Asset) -> int:
                return len(memberships.get(asset.id, []))

        elif category in (
            DuplicateCategory.NAME_DATE_MATCH,
            DuplicateCategory.TIME_MATCH_NAME_MISMATCH,
        ):

            def primary(asset: Asset) -> int:
                return asset.size_bytes

        else:
            raise ValueError(f"Category {category.label} has no keeper")

        ranked = sorted(
            enumerate(assets),
            key=lambda item: (-primary(item[1]), -int(item[1].is_favorite), item[0]),
        )
        keeper_index, keeper = ranked[0]
        to_delete = [asset for index, asset in enumerate(assets) if index != keeper_index]

        logger.debug(
            f"Selected keeper {keeper.id} ({keeper.original_file_name}) "
            f"for {category.label}, {len(to_delete)} to delete"
        )
        return KeeperSelection(keeper=keeper, to_delete=to_delete)
