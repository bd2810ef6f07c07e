"""Batch processing of categorized duplicate groups."""

import logging
import threading
from collections.abc import Callable

from .albums import AlbumReconciler
from .classifier import DuplicateClassifier
from .exceptions import MediaLibraryError
from .interfaces import MediaLibraryClient, ProgressCallback, RecordSink
from .keeper import KeeperSelector
from .models import (
    AssetDetail,
    CategorizedDuplicates,
    DuplicateCategory,
    DuplicateGroup,
    GroupActionRecord,
    OutcomeCounters,
    SkipPolicy,
    UnchangedGroupRecord,
)

logger = logging.getLogger(__name__)

# Order in which categories are acted on; Unchanged groups are only recorded
PROCESSING_ORDER = (
    DuplicateCategory.IDENTICAL_CONTENT,
    DuplicateCategory.EXTENSION_MISMATCH,
    DuplicateCategory.NAME_DATE_MATCH,
    DuplicateCategory.BURST_SEQUENCE,
    DuplicateCategory.TIME_MATCH_NAME_MISMATCH,
)


class DuplicateProcessor:
    """Executes the deletes, stacks and album updates for categorized duplicates."""

    def __init__(
        self,
        client: MediaLibraryClient,
        dry_run: bool = False,
        record_sink: RecordSink | None = None,
        progress_callback: ProgressCallback | None = None,
    ):
        """
        Initialize the processor.

        Args:
            client: Media library the mutations are sent to
            dry_run: Compute and record every action without mutating anything
            record_sink: Optional consumer of action and unchanged records
            progress_callback: Optional callback invoked before each group
        """
        self.client = client
        self.dry_run = dry_run
        self.record_sink = record_sink
        self.progress_callback = progress_callback
        self.keeper_selector = KeeperSelector()
        self.album_reconciler = AlbumReconciler(client)
        self.records: list[GroupActionRecord | UnchangedGroupRecord] = []

        self._handlers: dict[
            DuplicateCategory, Callable[[DuplicateGroup, DuplicateCategory], OutcomeCounters]
        ] = {
            DuplicateCategory.IDENTICAL_CONTENT: self._process_delete_group,
            DuplicateCategory.EXTENSION_MISMATCH: self._process_stack_group,
            DuplicateCategory.NAME_DATE_MATCH: self._process_delete_group,
            DuplicateCategory.BURST_SEQUENCE: self._process_stack_group,
            DuplicateCategory.TIME_MATCH_NAME_MISMATCH: self._process_delete_group,
        }
        missing = set(PROCESSING_ORDER) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for categories: {sorted(c.name for c in missing)}")

    def run(
        self,
        groups: list[DuplicateGroup],
        skip_policy: SkipPolicy | None = None,
        cancel_event: threading.Event | None = None,
    ) -> OutcomeCounters:
        """
        Classify the fetched groups and process them.

        Args:
            groups: Duplicate groups in the order they were fetched
            skip_policy: Categories to leave untouched
            cancel_event: Set to stop before the next group

        Returns:
            Outcome counters of the run
        """
        categorized = DuplicateClassifier(skip_policy).categorize(groups)
        return self.process(categorized, cancel_event)

    def process(
        self,
        categorized: CategorizedDuplicates,
        cancel_event: threading.Event | None = None,
    ) -> OutcomeCounters:
        """
        Act on every categorized group in priority order.

        Args:
            categorized: Groups partitioned by category
            cancel_event: Checked before each group; once set, processing stops

        Returns:
            Outcome counters; partial with cancelled=True when stopped early

        A group that has started is always completed before the cancel event
        is checked again.
        """
        counters = OutcomeCounters(unchanged=len(categorized.unchanged))
        total = categorized.actionable_count

        if total == 0:
            logger.info("No duplicates to process.")

        current = 0
        for category in PROCESSING_ORDER:
            handler = self._handlers[category]

            for group in categorized.bucket(category):
                if cancel_event is not None and cancel_event.is_set():
                    logger.warning(
                        f"Processing cancelled after {counters.processed} of {total} groups"
                    )
                    counters.cancelled = True
                    return counters

                current += 1
                if self.progress_callback is not None:
                    self.progress_callback(
                        current,
                        total,
                        f"#{group.original_index} {category.label}: "
                        f"{group.assets[0].original_file_name}",
                    )

                logger.debug(
                    f"Processing {category.label} group #{group.original_index}: "
                    f"{group.duplicate_id}"
                )
                try:
                    outcome = handler(group, category)
                except MediaLibraryError as e:
                    logger.error(
                        f"Failed to process group #{group.original_index} "
                        f"{group.duplicate_id}: {e}"
                    )
                    outcome = OutcomeCounters(processed=1)

                counters.add(outcome)

        for group in categorized.unchanged:
            self._record_unchanged(group)

        logger.info(
            f"Processed {counters.processed} groups: {counters.deleted} deleted, "
            f"{counters.stacked} stacked, {counters.albums_updated} album assignments"
        )
        return counters

    def _process_delete_group(
        self, group: DuplicateGroup, category: DuplicateCategory
    ) -> OutcomeCounters:
        """Keep one asset, move its album memberships over and delete the rest."""
        memberships = None
        if category == DuplicateCategory.IDENTICAL_CONTENT:
            memberships = self.album_reconciler.fetch_memberships(group.assets)

        selection = self.keeper_selector.select(group.assets, category, memberships)
        keeper = selection.keeper
        album_ids = self.album_reconciler.albums_to_add(keeper, selection.to_delete, memberships)

        if category == DuplicateCategory.IDENTICAL_CONTENT:
            action = (
                f"Keep: {keeper.id} ({keeper.original_file_name}), "
                f"Delete: {len(selection.to_delete)} assets, Add to {len(album_ids)} albums"
            )
        else:
            action = (
                f"Keep largest: {keeper.id} ({keeper.original_file_name}, "
                f"{keeper.size_bytes:,} bytes), Delete: {len(selection.to_delete)} assets, "
                f"Add to {len(album_ids)} albums"
            )
        self._record_action(group, category, action)

        if self.dry_run:
            return OutcomeCounters(
                processed=1, deleted=len(selection.to_delete), albums_updated=len(album_ids)
            )

        added = self.album_reconciler.add_keeper(keeper, album_ids)
        if len(added) < len(album_ids):
            logger.error(
                f"Not deleting duplicates of group #{group.original_index} "
                f"{group.duplicate_id}: {len(album_ids) - len(added)} album assignments failed"
            )
            return OutcomeCounters(processed=1, albums_updated=len(added))

        if not self.client.delete_assets(selection.delete_ids):
            logger.error(
                f"Failed to delete assets for group #{group.original_index} {group.duplicate_id}"
            )
            return OutcomeCounters(processed=1, albums_updated=len(added))

        return OutcomeCounters(
            processed=1, deleted=len(selection.to_delete), albums_updated=len(added)
        )

    def _process_stack_group(
        self, group: DuplicateGroup, category: DuplicateCategory
    ) -> OutcomeCounters:
        """Combine every asset of the group into one stack."""
        file_names = ", ".join(asset.original_file_name for asset in group.assets)
        if category == DuplicateCategory.BURST_SEQUENCE:
            action = f"Create stack with burst photos: {file_names}"
        else:
            action = f"Create stack with assets: {file_names}"
        self._record_action(group, category, action)

        if self.dry_run:
            return OutcomeCounters(processed=1, stacked=1)

        stack_id = self.client.create_stack(group.asset_ids)
        if stack_id is None:
            logger.error(
                f"Failed to create stack for group #{group.original_index} {group.duplicate_id}"
            )
            return OutcomeCounters(processed=1)

        logger.debug(f"Created stack {stack_id} for group #{group.original_index}")
        return OutcomeCounters(processed=1, stacked=1)

    def _record_action(
        self, group: DuplicateGroup, category: DuplicateCategory, action: str
    ) -> None:
        self._emit(
            GroupActionRecord(
                index=group.original_index,
                duplicate_id=group.duplicate_id,
                category=category,
                asset_ids=group.asset_ids,
                action=action,
            )
        )

    def _record_unchanged(self, group: DuplicateGroup) -> None:
        self._emit(
            UnchangedGroupRecord(
                index=group.original_index,
                duplicate_id=group.duplicate_id,
                assets=[AssetDetail.from_asset(asset) for asset in group.assets],
            )
        )

    def _emit(self, record: GroupActionRecord | UnchangedGroupRecord) -> None:
        self.records.append(record)
        if self.record_sink is not None:
            self.record_sink(record)
