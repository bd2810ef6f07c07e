"""Pydantic models for immich deduplicator."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DuplicateCategory(str, Enum):
    """Processing category assigned to a duplicate group."""

    IDENTICAL_CONTENT = "SameChecksumSameDate"
    EXTENSION_MISMATCH = "DifferentExtension"
    NAME_DATE_MATCH = "SameNameSameDate"
    BURST_SEQUENCE = "BurstPhotos"
    TIME_MATCH_NAME_MISMATCH = "SameTimeDifferentName"
    UNCHANGED = "Unchanged"

    @property
    def label(self) -> str:
        """Human readable name for tables and summaries."""
        return _CATEGORY_LABELS[self]

    @property
    def is_delete_category(self) -> bool:
        """Categories resolved by keeping one asset and deleting the rest."""
        return self in (
            DuplicateCategory.IDENTICAL_CONTENT,
            DuplicateCategory.NAME_DATE_MATCH,
            DuplicateCategory.TIME_MATCH_NAME_MISMATCH,
        )

    @property
    def is_stack_category(self) -> bool:
        """Categories resolved by stacking every asset of the group."""
        return self in (DuplicateCategory.EXTENSION_MISMATCH, DuplicateCategory.BURST_SEQUENCE)


_CATEGORY_LABELS = {
    DuplicateCategory.IDENTICAL_CONTENT: "Same Checksum & Date",
    DuplicateCategory.EXTENSION_MISMATCH: "Different Extension",
    DuplicateCategory.NAME_DATE_MATCH: "Same Name & Date",
    DuplicateCategory.BURST_SEQUENCE: "Burst Photos",
    DuplicateCategory.TIME_MATCH_NAME_MISMATCH: "Same Time Different Name",
    DuplicateCategory.UNCHANGED: "Unchanged",
}


class ExifInfo(BaseModel):
    """EXIF metadata attached to an asset."""

    model_config = ConfigDict(populate_by_name=True)

    file_size_in_byte: int | None = Field(
        None, ge=0, alias="fileSizeInByte", description="File size in bytes"
    )
    make: str | None = Field(None, description="Camera make")
    model: str | None = Field(None, description="Camera model")
    description: str | None = Field(None, description="Free text description")


class Asset(BaseModel):
    """Represents an asset returned by the media library."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Asset identifier")
    original_file_name: str = Field(..., alias="originalFileName", description="Original filename")
    checksum: str = Field(..., min_length=1, description="Content checksum")
    file_created_at: datetime = Field(
        ..., alias="fileCreatedAt", description="Absolute creation instant"
    )
    local_datetime: datetime = Field(
        ..., alias="localDateTime", description="Creation time as local wall-clock time"
    )
    is_favorite: bool = Field(False, alias="isFavorite", description="Favorite flag")
    exif_info: ExifInfo | None = Field(None, alias="exifInfo", description="EXIF metadata")
    original_path: str = Field("", alias="originalPath", description="Path on the server")
    original_mime_type: str = Field("", alias="originalMimeType", description="MIME type")
    type: str = Field("", description="Asset type (IMAGE, VIDEO)")

    @field_validator("local_datetime")
    @classmethod
    def drop_timezone(cls, v: datetime) -> datetime:
        """Treat the local timestamp as naive wall-clock time."""
        return v.replace(tzinfo=None)

    @property
    def size_bytes(self) -> int:
        """File size in bytes, 0 when unknown."""
        if self.exif_info is None or self.exif_info.file_size_in_byte is None:
            return 0
        return self.exif_info.file_size_in_byte

    @property
    def stem(self) -> str:
        """Filename without its extension."""
        return PurePosixPath(self.original_file_name).stem

    @property
    def extension(self) -> str:
        """Lower-case extension without the leading dot."""
        return PurePosixPath(self.original_file_name).suffix.lstrip(".").lower()

    @property
    def local_date(self) -> date:
        """Local calendar date of creation."""
        return self.local_datetime.date()

    def __str__(self) -> str:
        return f"{self.original_file_name} ({self.id})"


class Album(BaseModel):
    """Represents an album in the media library."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Album identifier")
    album_name: str = Field("", alias="albumName", description="Album name")
    asset_count: int = Field(0, ge=0, alias="assetCount", description="Assets in the album")


class DuplicateGroup(BaseModel):
    """Represents a group of assets the media library considers duplicates."""

    model_config = ConfigDict(populate_by_name=True)

    duplicate_id: str = Field(..., alias="duplicateId", description="Duplicate group identifier")
    assets: list[Asset] = Field(default_factory=list, description="Assets in discovery order")
    original_index: int = Field(
        0, ge=0, description="Position of the group in the fetched list"
    )

    @property
    def asset_count(self) -> int:
        """Number of assets in this group."""
        return len(self.assets)

    @property
    def asset_ids(self) -> list[str]:
        """Asset identifiers in discovery order."""
        return [asset.id for asset in self.assets]

    def __str__(self) -> str:
        return f"Duplicate group #{self.original_index} '{self.duplicate_id}' ({self.asset_count} assets)"


class SkipPolicy(BaseModel):
    """Categories the user asked to leave untouched."""

    skip_identical_content: bool = Field(False, description="Skip same checksum & date groups")
    skip_extension_mismatch: bool = Field(False, description="Skip different extension groups")
    skip_name_date_match: bool = Field(False, description="Skip same name & date groups")
    skip_burst_sequence: bool = Field(False, description="Skip burst photo groups")
    skip_time_match_name_mismatch: bool = Field(
        False, description="Skip same time different name groups"
    )

    def excludes(self, category: DuplicateCategory) -> bool:
        """Whether groups of this category must be reported as unchanged."""
        flags = {
            DuplicateCategory.IDENTICAL_CONTENT: self.skip_identical_content,
            DuplicateCategory.EXTENSION_MISMATCH: self.skip_extension_mismatch,
            DuplicateCategory.NAME_DATE_MATCH: self.skip_name_date_match,
            DuplicateCategory.BURST_SEQUENCE: self.skip_burst_sequence,
            DuplicateCategory.TIME_MATCH_NAME_MISMATCH: self.skip_time_match_name_mismatch,
        }
        return flags.get(category, False)

    @property
    def skipped_categories(self) -> list[DuplicateCategory]:
        """Categories excluded by this policy, in processing order."""
        return [category for category in DuplicateCategory if self.excludes(category)]


class CategorizedDuplicates(BaseModel):
    """Duplicate groups partitioned by category."""

    identical_content: list[DuplicateGroup] = Field(default_factory=list)
    extension_mismatch: list[DuplicateGroup] = Field(default_factory=list)
    name_date_match: list[DuplicateGroup] = Field(default_factory=list)
    burst_sequence: list[DuplicateGroup] = Field(default_factory=list)
    time_match_name_mismatch: list[DuplicateGroup] = Field(default_factory=list)
    unchanged: list[DuplicateGroup] = Field(default_factory=list)

    def bucket(self, category: DuplicateCategory) -> list[DuplicateGroup]:
        """Groups reported under the given category."""
        return getattr(self, category.name.lower())

    def add(self, category: DuplicateCategory, group: DuplicateGroup) -> None:
        """Append a group to the bucket of the given category."""
        self.bucket(category).append(group)

    @property
    def actionable_count(self) -> int:
        """Number of groups that will be acted on."""
        return self.total_count - len(self.unchanged)

    @property
    def total_count(self) -> int:
        """Number of groups across all buckets."""
        return sum(len(self.bucket(category)) for category in DuplicateCategory)


@dataclass
class OutcomeCounters:
    """Statistics accumulated over one processing run."""

    processed: int = 0
    deleted: int = 0
    stacked: int = 0
    albums_updated: int = 0
    unchanged: int = 0
    cancelled: bool = False

    def add(self, other: "OutcomeCounters") -> None:
        """Accumulate the counts of another outcome into this one."""
        self.processed += other.processed
        self.deleted += other.deleted
        self.stacked += other.stacked
        self.albums_updated += other.albums_updated
        self.unchanged += other.unchanged


class AssetDetail(BaseModel):
    """Per-asset metadata kept for manual review of unchanged groups."""

    id: str
    file_name: str
    checksum: str
    extension: str
    created_at: datetime
    size_bytes: int = 0

    @classmethod
    def from_asset(cls, asset: Asset) -> "AssetDetail":
        """Build the detail entry for an asset."""
        return cls(
            id=asset.id,
            file_name=asset.original_file_name,
            checksum=asset.checksum,
            extension=asset.extension,
            created_at=asset.file_created_at,
            size_bytes=asset.size_bytes,
        )


class GroupActionRecord(BaseModel):
    """Log entry describing the action taken for a duplicate group."""

    index: int
    duplicate_id: str
    category: DuplicateCategory
    asset_ids: list[str]
    action: str


class UnchangedGroupRecord(BaseModel):
    """Log entry for a group that was left untouched."""

    index: int
    duplicate_id: str
    assets: list[AssetDetail]
    reason: str = "Does not match any processing criteria"


class ApplicationConfig(BaseModel):
    """Configuration settings for the application."""

    server_url: str = Field(..., min_length=1, description="Immich server URL")
    api_key: str = Field(..., min_length=1, description="Immich API key")
    dry_run: bool = Field(default=False, description="Compute actions without mutating anything")
    verbose: bool = Field(default=False, description="Write verbose entries to the audit log")
    log_path: str = Field(default="deduplication.log", description="Audit log file path")
    limit: int | None = Field(default=None, gt=0, description="Process only the first N groups")
    request_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    log_level: str = Field(default="INFO", description="Logging level")
    assume_yes: bool = Field(default=False, description="Skip the confirmation prompt")
    skip_policy: SkipPolicy = Field(default_factory=SkipPolicy)

    @field_validator("server_url")
    @classmethod
    def validate_server_url(cls, v: str) -> str:
        """Require an http(s) URL and strip trailing slashes."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("server URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the level name to upper case."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"Unknown log level: {v}")
        return level
