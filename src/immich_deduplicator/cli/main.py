"""CLI entry point for immich deduplicator."""

import argparse
import logging
import os
import signal
import sys
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from pydantic import ValidationError

from .. import __version__
from ..api import ImmichApiClient
from ..core import (
    PROCESSING_ORDER,
    ApplicationConfig,
    AuditLog,
    CategorizedDuplicates,
    DeduplicatorError,
    DuplicateCategory,
    DuplicateClassifier,
    DuplicateProcessor,
    ImmichApiError,
    OutcomeCounters,
    SkipPolicy,
)

logger = logging.getLogger(__name__)

CATEGORY_ACTIONS = {
    DuplicateCategory.IDENTICAL_CONTENT: "Keep asset in most albums, delete others",
    DuplicateCategory.EXTENSION_MISMATCH: "Create stack",
    DuplicateCategory.NAME_DATE_MATCH: "Keep largest, delete others",
    DuplicateCategory.BURST_SEQUENCE: "Create stack",
    DuplicateCategory.TIME_MATCH_NAME_MISMATCH: "Keep largest, delete others",
    DuplicateCategory.UNCHANGED: "No action",
}


def setup_logging(level: str = "INFO") -> None:
    """
    Set up logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Console output stays at the requested level even when the package logger
    # is lowered for the verbose audit log
    for handler in logging.getLogger().handlers:
        handler.setLevel(getattr(logging, level.upper()))


def build_config(args: argparse.Namespace) -> ApplicationConfig:
    """
    Build the application configuration from parsed arguments.

    Raises:
        ValidationError: If an argument value is invalid
    """
    return ApplicationConfig(
        server_url=args.server,
        api_key=args.api_key,
        dry_run=args.dry_run,
        verbose=args.verbose,
        log_path=args.log_path,
        limit=args.limit,
        request_timeout=args.timeout,
        log_level=args.log_level,
        assume_yes=args.yes,
        skip_policy=SkipPolicy(
            skip_identical_content=args.skip_checksum,
            skip_extension_mismatch=args.skip_extension,
            skip_name_date_match=args.skip_name_date,
            skip_burst_sequence=args.skip_burst,
            skip_time_match_name_mismatch=args.skip_same_time,
        ),
    )


def print_categories(categorized: CategorizedDuplicates, dry_run: bool = False) -> None:
    """
    Print the number of groups per category and the action planned for each.

    Args:
        categorized: Groups partitioned by category
        dry_run: Whether the run will only simulate its actions
    """
    print("\n" + "=" * 60)
    print("DUPLICATE CATEGORIES" + (" (DRY RUN)" if dry_run else ""))
    print("=" * 60)

    for category in (*PROCESSING_ORDER, DuplicateCategory.UNCHANGED):
        count = len(categorized.bucket(category))
        print(f"{category.label:<26} {count:>6}  {CATEGORY_ACTIONS[category]}")

    print("-" * 60)
    print(f"{'Total':<26} {categorized.total_count:>6}")


def print_summary(counters: OutcomeCounters, dry_run: bool = False) -> None:
    """
    Print the outcome of a processing run.

    Args:
        counters: Counters returned by the processor
        dry_run: Whether the run only simulated its actions
    """
    print("\n" + "=" * 60)
    print("SUMMARY" + (" (DRY RUN - no changes were made)" if dry_run else ""))
    print("=" * 60)
    print(f"Duplicates processed: {counters.processed}")
    print(f"Assets deleted: {counters.deleted}")
    print(f"Stacks created: {counters.stacked}")
    print(f"Album assignments updated: {counters.albums_updated}")
    print(f"Unchanged: {counters.unchanged}")

    if counters.cancelled:
        print("\n⚠️  Processing was cancelled; the counts above are partial.")


def confirm_proceed(dry_run: bool = False) -> bool:
    """Ask the user to confirm before any group is processed."""
    action = "simulate processing of" if dry_run else "process"
    answer = input(f"\nDo you want to {action} these duplicates? [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def print_progress(current: int, total: int | None = None, message: str = "") -> None:
    """Progress callback for the CLI."""
    if total:
        print(f"\rProcessing ({current}/{total}) {message}", end="", flush=True)
    else:
        print(f"\rProcessing {message}", end="", flush=True)


@contextmanager
def cancel_on_interrupt(cancel_event: threading.Event) -> Iterator[None]:
    """Set the cancel event on Ctrl+C instead of raising KeyboardInterrupt."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def handler(signum, frame) -> None:
        logger.warning("Cancellation requested, finishing the current group")
        cancel_event.set()

    previous = signal.signal(signal.SIGINT, handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def run_deduplication(
    config: ApplicationConfig,
    client_factory: Callable[..., ImmichApiClient] = ImmichApiClient,
    cancel_event: threading.Event | None = None,
) -> int:
    """
    Run a full deduplication pass against an Immich server.

    Args:
        config: Application configuration
        client_factory: Callable creating the API client
        cancel_event: Event used to stop processing early

    Returns:
        Exit code (0 for success, 1 for a fatal error)
    """
    cancel_event = cancel_event or threading.Event()
    package_logger = logging.getLogger("immich_deduplicator")
    previous_level = package_logger.level
    if config.verbose:
        package_logger.setLevel(logging.DEBUG)

    try:
        with AuditLog(config.log_path, verbose=config.verbose) as audit:
            audit.attach(package_logger, logging.DEBUG if config.verbose else logging.WARNING)
            audit.info("Starting Immich Deduplicator")
            audit.info(f"Server: {config.server_url}")
            audit.info(f"Mode: {'DRY RUN' if config.dry_run else 'LIVE'}")
            audit.info(f"Limit: {config.limit if config.limit else 'None'}")
            for category in config.skip_policy.skipped_categories:
                audit.info(f"Skipping: {category.label}")
            audit.info(f"Log Path: {config.log_path}")

            print(f"Mode: {'DRY RUN - no changes will be made' if config.dry_run else 'LIVE'}")

            with client_factory(
                config.server_url, config.api_key, timeout=config.request_timeout
            ) as client:
                print("Connecting to Immich server...")
                try:
                    server_version = client.validate_connection()
                except ImmichApiError as e:
                    print(f"Error: {e}")
                    audit.error(f"Connection failed: {e}")
                    return 1

                print(f"Connected to Immich {server_version}")
                audit.success(f"Connected to Immich {server_version}")

                print("Fetching duplicates from server...")
                try:
                    groups = client.fetch_duplicate_groups()
                except ImmichApiError as e:
                    print(f"Error: {e}")
                    audit.error(f"Failed to fetch duplicates: {e}")
                    return 1

                if not groups:
                    print("\n✅ No duplicates found. Your library is clean!")
                    audit.info("No duplicates found")
                    return 0

                print(f"Found {len(groups)} duplicate group(s)")
                audit.info(f"Found {len(groups)} duplicate groups")

                if config.limit:
                    groups = groups[: config.limit]
                    print(f"Limiting to first {config.limit} duplicate group(s)")
                    audit.info(f"Limited to {config.limit} duplicate groups")

                categorized = DuplicateClassifier(config.skip_policy).categorize(groups)
                print_categories(categorized, dry_run=config.dry_run)

                if (
                    categorized.actionable_count
                    and not config.assume_yes
                    and not confirm_proceed(config.dry_run)
                ):
                    print("\nOperation cancelled.")
                    audit.info("Operation cancelled by user")
                    return 0

                print("\nProcessing duplicates...")
                audit.info("Starting duplicate processing")

                processor = DuplicateProcessor(
                    client,
                    dry_run=config.dry_run,
                    record_sink=audit,
                    progress_callback=print_progress,
                )
                with cancel_on_interrupt(cancel_event):
                    counters = processor.process(categorized, cancel_event)
                print()

            if counters.cancelled:
                audit.warning("Processing cancelled by user")
            audit.log_summary(counters, config.dry_run)
            print_summary(counters, dry_run=config.dry_run)
            print(f"\nLog file saved to: {audit.log_path.resolve()}")

        return 0
    finally:
        package_logger.setLevel(previous_level)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Immich Deduplicator - Resolve duplicate groups reported by an Immich server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Preview what would happen
  immich-deduplicator --server https://photos.example.com --api-key KEY --dry-run

  # Process only the first 10 duplicate groups
  immich-deduplicator --server https://photos.example.com --api-key KEY --limit 10

  # Leave burst photos and RAW+JPEG pairs alone
  immich-deduplicator --server https://photos.example.com --api-key KEY --skip-burst --skip-extension

The server URL and API key may also be set with IMMICH_SERVER and IMMICH_API_KEY.
        """,
    )

    # Connection options
    server_default = os.environ.get("IMMICH_SERVER")
    parser.add_argument(
        "--server",
        default=server_default,
        required=server_default is None,
        metavar="URL",
        help="Immich server URL (e.g., https://your-immich-server.com)",
    )

    api_key_default = os.environ.get("IMMICH_API_KEY")
    parser.add_argument(
        "--api-key",
        default=api_key_default,
        required=api_key_default is None,
        help="Immich API key",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        metavar="SECONDS",
        help="Timeout for each API request (default: 30)",
    )

    # Run options
    parser.add_argument(
        "--dry-run", action="store_true", help="Run without making any actual changes"
    )

    parser.add_argument(
        "--limit",
        type=int,
        metavar="N",
        help="Limit the number of duplicate groups to process (useful for testing)",
    )

    parser.add_argument(
        "-y", "--yes", action="store_true", help="Do not ask for confirmation before processing"
    )

    # Skip options
    parser.add_argument(
        "--skip-checksum",
        action="store_true",
        help="Skip processing duplicates with same checksum & date",
    )
    parser.add_argument(
        "--skip-extension",
        action="store_true",
        help="Skip processing duplicates with different extensions (no stacking)",
    )
    parser.add_argument(
        "--skip-name-date",
        action="store_true",
        help="Skip processing duplicates with same name & date",
    )
    parser.add_argument(
        "--skip-burst",
        action="store_true",
        help="Skip processing burst photos (sequential names, close timestamps)",
    )
    parser.add_argument(
        "--skip-same-time",
        action="store_true",
        help="Skip processing duplicates with same time but different names",
    )

    # Logging options
    parser.add_argument(
        "--log-path",
        default="deduplication.log",
        help="Path of the audit log file (default: deduplication.log)",
    )

    parser.add_argument(
        "--verbose", action="store_true", help="Write detailed entries to the audit log"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set console logging level (default: WARNING)",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Set up logging
    setup_logging(args.log_level)

    try:
        config = build_config(args)
    except ValidationError as e:
        parser.error(f"invalid arguments: {e}")

    try:
        return run_deduplication(config)

    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.")
        return 0
    except DeduplicatorError as e:
        print(f"Error: {e}")
        return 1
    except Exception as e:
        logger.exception("Unexpected error occurred")
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
