"""
Error types shared by the fetcher, normalizer, store and HTTP layer.
"""

from typing import Any


class GalleryError(Exception):
    """Base exception for gallery-proxy."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Render the error as a JSON-ready response body."""
        return {"error": self.message, **self.details}


class AuthError(GalleryError):
    """Missing or incorrect API key."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class UpstreamError(GalleryError):
    """The asset provider answered with a non-success status or was unreachable."""

    def __init__(self, status: int, message: str):
        self.status = status
        super().__init__(message, {"status": status})


class NormalizationError(GalleryError):
    """Detail fetch failed for one asset while normalizing a batch."""

    def __init__(self, asset_id: str, cause: Exception):
        self.asset_id = asset_id
        self.cause = cause
        super().__init__(
            f"Failed to normalize resource {asset_id}: {cause}",
            {"asset_id": asset_id},
        )


class CacheError(GalleryError):
    """The key-value store could not be read or written."""
