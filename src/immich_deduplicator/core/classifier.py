"""Duplicate classification module for assigning groups to processing categories."""

import logging

from .models import CategorizedDuplicates, DuplicateCategory, DuplicateGroup, SkipPolicy
from .parser import FilenameParser

logger = logging.getLogger(__name__)

# Assets created within this many seconds are considered taken at the same time
SAME_TIME_SECONDS = 1.0
# Maximum gap between two shots of a burst
BURST_WINDOW_SECONDS = 5.0


class DuplicateClassifier:
    """Classifies duplicate groups and partitions them by category."""

    def __init__(self, skip_policy: SkipPolicy | None = None):
        """Initialize the classifier with a filename parser and optional skip policy."""
        self.parser = FilenameParser()
        self.skip_policy = skip_policy or SkipPolicy()

    def classify(self, group: DuplicateGroup) -> DuplicateCategory:
        """
        Determine the processing category of a duplicate group.

        Args:
            group: Duplicate group to classify

        Returns:
            The first matching category, Unchanged if no rule applies

        Rules are evaluated in order: identical content, same name and date,
        then the pair-only rules (different extension, same time with a
        different name, burst sequence).
        """
        assets = group.assets
        if len(assets) < 2:
            return DuplicateCategory.UNCHANGED

        first = assets[0]
        all_same_checksum = all(asset.checksum == first.checksum for asset in assets)
        all_same_date = all(asset.local_date == first.local_date for asset in assets)

        if all_same_checksum and all_same_date:
            return DuplicateCategory.IDENTICAL_CONTENT

        first_stem = first.stem.lower()
        all_same_name = all(asset.stem.lower() == first_stem for asset in assets)
        # A RAW+JPEG pair shares its name but must be stacked, not deduplicated
        all_same_extension = all(asset.extension == first.extension for asset in assets)

        if all_same_name and all_same_date and all_same_extension:
            return DuplicateCategory.NAME_DATE_MATCH

        if len(assets) == 2:
            return self._classify_pair(group)

        return DuplicateCategory.UNCHANGED

    def _classify_pair(self, group: DuplicateGroup) -> DuplicateCategory:
        """Apply the rules that only make sense for two assets."""
        asset1, asset2 = group.assets

        same_extension = asset1.extension == asset2.extension
        same_date = asset1.local_date == asset2.local_date
        same_name = asset1.stem.lower() == asset2.stem.lower()
        time_diff = abs((asset1.local_datetime - asset2.local_datetime).total_seconds())
        same_time = time_diff < SAME_TIME_SECONDS

        if not same_extension and same_date:
            return DuplicateCategory.EXTENSION_MISMATCH

        if same_extension and same_date and not same_name and same_time:
            return DuplicateCategory.TIME_MATCH_NAME_MISMATCH

        if (
            same_extension
            and same_date
            and not same_name
            and not same_time
            and time_diff <= BURST_WINDOW_SECONDS
            and self.parser.are_burst_names(asset1.stem, asset2.stem)
        ):
            return DuplicateCategory.BURST_SEQUENCE

        return DuplicateCategory.UNCHANGED

    def is_skipped(self, category: DuplicateCategory) -> bool:
        """
        Check whether the skip policy redirects a category to Unchanged.

        Args:
            category: Category computed by classify()

        Returns:
            True if groups of this category must not be acted on
        """
        if category == DuplicateCategory.UNCHANGED:
            return False
        return self.skip_policy.excludes(category)

    def categorize(self, groups: list[DuplicateGroup]) -> CategorizedDuplicates:
        """
        Partition duplicate groups into category buckets.

        Args:
            groups: Duplicate groups in the order they were fetched

        Returns:
            CategorizedDuplicates where every group appears in exactly one bucket

        Records each group's position in the input as its original index.
        Groups of a skipped category are reported as unchanged.
        """
        result = CategorizedDuplicates()

        for index, group in enumerate(groups):
            group.original_index = index
            category = self.classify(group)

            if self.is_skipped(category):
                logger.debug(f"Skipping group #{index} ({category.label}) per skip policy")
                result.add(DuplicateCategory.UNCHANGED, group)
                continue

            result.add(category, group)

        logger.info(
            f"Categorized {len(groups)} duplicate groups: "
            f"{result.actionable_count} actionable, {len(result.unchanged)} unchanged"
        )
        return result
