"""
Abstract base class and data models for asset providers.

Enables swapping Cloudinary for another digital-asset-management API.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Embedded metadata keys that may carry a caption, in order of preference
CAPTION_METADATA_KEYS = ("Caption-Abstract", "ImageDescription")


class RawResource(BaseModel):
    """A resource descriptor as returned by the asset provider.

    Unknown fields are kept so the stored snapshot mirrors the upstream payload.
    """

    model_config = ConfigDict(extra="allow")

    asset_id: str = Field(description="Immutable asset identifier")
    public_id: str = Field(default="", description="Public (path-like) identifier")
    secure_url: str = Field(default="", description="HTTPS delivery URL")
    width: int | None = Field(default=None, description="Width in pixels")
    height: int | None = Field(default=None, description="Height in pixels")
    colors: list[list[Any]] | None = Field(
        default=None,
        description="Dominant color swatches as [hex, percent] pairs",
    )
    context: dict[str, Any] | None = Field(default=None, description="Structured context")
    image_metadata: dict[str, Any] | None = Field(
        default=None, description="Embedded IPTC/EXIF metadata"
    )

    @property
    def caption(self) -> str | None:
        """Return the caption from structured context or embedded metadata."""
        custom = (self.context or {}).get("custom") or {}
        caption = custom.get("caption") if isinstance(custom, dict) else None
        if isinstance(caption, str) and caption.strip():
            return caption

        metadata = self.image_metadata or {}
        for key in CAPTION_METADATA_KEYS:
            value = metadata.get(key)
            if isinstance(value, str) and value.strip():
                return value
        return None


class FolderListing(BaseModel):
    """A full folder listing; extra top-level fields are preserved."""

    model_config = ConfigDict(extra="allow")

    resources: list[RawResource] = Field(default_factory=list)


class AssetProvider(ABC):
    """Abstract interface for the upstream asset API."""

    @abstractmethod
    async def fetch_folder_listing(self) -> FolderListing:
        """
        Fetch every resource in the configured folder.

        Raises:
            UpstreamError: On any non-success response
        """
        pass

    @abstractmethod
    async def fetch_resource_detail(self, resource: RawResource) -> RawResource:
        """
        Fetch color and metadata detail for one resource.

        Raises:
            UpstreamError: On any non-success response
        """
        pass

    async def aclose(self) -> None:
        """Release network resources."""
        return None
