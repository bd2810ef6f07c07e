"""Core functionality for immich deduplicator."""

from .albums import AlbumReconciler
from .audit import AuditLog
from .classifier import DuplicateClassifier
from .exceptions import (
    AuthenticationError,
    ConnectionFailedError,
    DeduplicatorError,
    ImmichApiError,
    MediaLibraryError,
)
from .interfaces import MediaLibraryClient
from .keeper import KeeperSelection, KeeperSelector
from .models import (
    Album,
    ApplicationConfig,
    Asset,
    AssetDetail,
    CategorizedDuplicates,
    DuplicateCategory,
    DuplicateGroup,
    ExifInfo,
    GroupActionRecord,
    OutcomeCounters,
    SkipPolicy,
    UnchangedGroupRecord,
)
from .parser import FilenameParser
from .processor import PROCESSING_ORDER, DuplicateProcessor

__all__ = [
    "PROCESSING_ORDER",
    "Album",
    "AlbumReconciler",
    "ApplicationConfig",
    "Asset",
    "AssetDetail",
    "AuditLog",
    "AuthenticationError",
    "CategorizedDuplicates",
    "ConnectionFailedError",
    "DeduplicatorError",
    "DuplicateCategory",
    "DuplicateClassifier",
    "DuplicateGroup",
    "DuplicateProcessor",
    "ExifInfo",
    "FilenameParser",
    "GroupActionRecord",
    "ImmichApiError",
    "KeeperSelection",
    "KeeperSelector",
    "MediaLibraryClient",
    "MediaLibraryError",
    "OutcomeCounters",
    "SkipPolicy",
    "UnchangedGroupRecord",
]
