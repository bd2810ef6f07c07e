"""Exception hierarchy for immich deduplicator."""


class DeduplicatorError(Exception):
    """Base class for all errors raised by this package."""


class MediaLibraryError(DeduplicatorError):
    """A media library operation could not be completed."""


class ImmichApiError(MediaLibraryError):
    """The Immich API returned an error or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConnectionFailedError(ImmichApiError):
    """The Immich server could not be reached."""


class AuthenticationError(ImmichApiError):
    """The Immich server rejected the API key."""
