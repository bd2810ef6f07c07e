"""Plain-text audit log of a deduplication run."""

import logging
import threading
from datetime import datetime
from pathlib import Path

from .models import GroupActionRecord, OutcomeCounters, UnchangedGroupRecord

SEPARATOR = "=" * 80


class AuditLog:
    """Writes the human readable audit trail of a run to a file.

    The file is truncated when the log is opened. Instances are callable so
    they can be passed as a record sink to DuplicateProcessor.
    """

    def __init__(self, log_path: str | Path, verbose: bool = False):
        """
        Open the log file and write the header.

        Args:
            log_path: File to write, parent directories are created
            verbose: Whether verbose entries are written
        """
        self.log_path = Path(log_path)
        self.verbose_enabled = verbose
        self._lock = threading.Lock()
        self._handler: AuditHandler | None = None
        self._handler_target: logging.Logger | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("w", encoding="utf-8")
        self._write_header()

    def __enter__(self) -> "AuditLog":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __call__(self, record: GroupActionRecord | UnchangedGroupRecord) -> None:
        self.record(record)

    def _write(self, *lines: str) -> None:
        with self._lock:
            for line in lines:
                self._file.write(line + "\n")
            self._file.flush()

    def _write_header(self) -> None:
        self._write(
            SEPARATOR,
            "IMMICH DEDUPLICATOR LOG",
            f"Started: {datetime.now():%Y-%m-%d %H:%M:%S}",
            SEPARATOR,
            "",
        )

    def write_entry(self, level: str, message: str) -> None:
        """Write a single timestamped line."""
        self._write(f"[{datetime.now():%H:%M:%S}] [{level}] {message}")

    def info(self, message: str) -> None:
        self.write_entry("INFO", message)

    def success(self, message: str) -> None:
        self.write_entry("SUCCESS", message)

    def warning(self, message: str) -> None:
        self.write_entry("WARNING", message)

    def error(self, message: str) -> None:
        self.write_entry("ERROR", message)

    def verbose(self, message: str) -> None:
        if self.verbose_enabled:
            self.write_entry("VERBOSE", message)

    def record(self, record: GroupActionRecord | UnchangedGroupRecord) -> None:
        """Write the block for a processing record."""
        if isinstance(record, UnchangedGroupRecord):
            self.log_unchanged(record)
        else:
            self.log_duplicate(record)

    def log_duplicate(self, record: GroupActionRecord) -> None:
        """Write the block describing the action taken for a group."""
        self._write(
            f"[{datetime.now():%H:%M:%S}] DUPLICATE #{record.index}: {record.duplicate_id}",
            f"  Index: {record.index}",
            f"  Category: {record.category.value}",
            f"  Assets: {', '.join(record.asset_ids)}",
            f"  Action: {record.action}",
            "",
        )

    def log_unchanged(self, record: UnchangedGroupRecord) -> None:
        """Write the per-asset details of a group left for manual review."""
        lines = [
            f"[{datetime.now():%H:%M:%S}] UNCHANGED DUPLICATE #{record.index}: "
            f"{record.duplicate_id}",
            f"  Index: {record.index}",
            "  Assets:",
        ]
        for asset in record.assets:
            lines.extend(
                [
                    f"    - ID: {asset.id}",
                    f"      File: {asset.file_name}",
                    f"      Checksum: {asset.checksum}",
                    f"      Extension: {asset.extension}",
                    f"      Created: {asset.created_at:%Y-%m-%d %H:%M:%S}",
                    f"      Size: {asset.size_bytes:,} bytes",
                ]
            )
        lines.extend([f"  Reason: {record.reason}", ""])
        self._write(*lines)

    def log_summary(self, counters: OutcomeCounters, dry_run: bool) -> None:
        """Write the closing summary block."""
        self._write(
            "",
            SEPARATOR,
            "SUMMARY",
            SEPARATOR,
            f"Mode: {'DRY RUN' if dry_run else 'LIVE'}",
            f"Duplicates Processed: {counters.processed}",
            f"Assets Deleted: {counters.deleted}",
            f"Stacks Created: {counters.stacked}",
            f"Album Assignments Updated: {counters.albums_updated}",
            f"Unchanged: {counters.unchanged}",
            f"Cancelled: {'Yes' if counters.cancelled else 'No'}",
            f"Completed: {datetime.now():%Y-%m-%d %H:%M:%S}",
            SEPARATOR,
        )

    def attach(self, target: logging.Logger, level: int = logging.WARNING) -> None:
        """Forward records of a logger at or above level into this file."""
        self.detach()
        self._handler = AuditHandler(self, level)
        self._handler_target = target
        target.addHandler(self._handler)

    def detach(self) -> None:
        """Stop forwarding records from the attached logger."""
        if self._handler is not None and self._handler_target is not None:
            self._handler_target.removeHandler(self._handler)
        self._handler = None
        self._handler_target = None

    def close(self) -> None:
        """Detach from logging and close the file."""
        self.detach()
        with self._lock:
            if not self._file.closed:
                self._file.close()


class AuditHandler(logging.Handler):
    """Logging handler writing records as audit log entries."""

    LEVEL_NAMES = {"DEBUG": "VERBOSE", "CRITICAL": "ERROR"}

    def __init__(self, audit_log: AuditLog, level: int = logging.WARNING):
        super().__init__(level)
        self.audit_log = audit_log

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = self.LEVEL_NAMES.get(record.levelname, record.levelname)
            self.audit_log.write_entry(level, record.getMessage())
        except Exception:
            self.handleError(record)
