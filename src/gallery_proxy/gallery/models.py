"""
Data models for gallery pages and the cached gallery record.

Provides Pydantic models for normalized images, pagination metadata and the
single versioned record that holds the snapshot together with its derived pages.
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..upstream.base import FolderListing

# Bump when the stored record layout changes; older records are discarded
CACHE_VERSION = 1


class NormalizedImage(BaseModel):
    """Presentation-ready image record, serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(description="Caption slug plus short asset id, or p-<asset id>")
    url: str = Field(description="Baseline-size CDN URL")
    mobile_url: str = Field(description="Mobile-size CDN URL")
    large_url: str = Field(description="Large-size CDN URL")
    background_color: str = Field(description="Hex swatch or 'transparent'")
    color: Literal["black", "white"] = Field(description="Readable text color")
    width: int = Field(default=0, description="Width in pixels")
    height: int = Field(default=0, description="Height in pixels")
    caption: str | None = Field(default=None, description="Image caption")


class Pagination(BaseModel):
    """Pagination metadata of a response."""

    current_page: int
    per_page: int
    total_pages: int
    total_items: int


class GalleryPage(BaseModel):
    """Response envelope: one page of images plus pagination metadata."""

    images: list[NormalizedImage] = Field(default_factory=list)
    pagination: Pagination

    def to_response(self) -> dict:
        """Return the JSON body served to clients."""
        return self.model_dump(mode="json", by_alias=True)


class GalleryCacheRecord(BaseModel):
    """Snapshot and derived pages, persisted together under one key.

    ``pages`` maps page size to page number to images. A page is present only
    if it was computed against ``snapshot``; a new snapshot starts with no pages.
    """

    version: int = CACHE_VERSION
    snapshot_hash: str
    snapshot: FolderListing
    pages: dict[int, dict[int, list[NormalizedImage]]] = Field(default_factory=dict)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def get_page(self, per_page: int, page: int) -> list[NormalizedImage] | None:
        """Return the cached images of a page, or None if not computed yet."""
        return self.pages.get(per_page, {}).get(page)

    def set_page(
        self,
        per_page: int,
        page: int,
        images: list[NormalizedImage],
        max_page_sizes: int | None = None,
    ) -> None:
        """Store the images of a computed page.

        When ``max_page_sizes`` is set and a new page size would exceed it,
        the pages of the oldest page size are dropped first.
        """
        if max_page_sizes is not None and per_page not in self.pages:
            while self.pages and len(self.pages) >= max_page_sizes:
                evicted = next(iter(self.pages))
                del self.pages[evicted]
        self.pages.setdefault(per_page, {})[page] = images
        self.updated_at = datetime.now(timezone.utc)

    @property
    def page_count(self) -> int:
        """Total number of cached pages across all page sizes."""
        return sum(len(pages) for pages in self.pages.values())

    @property
    def total_items(self) -> int:
        """Number of resources in the snapshot."""
        return len(self.snapshot.resources)

    def to_store(self) -> dict:
        """Serialize for the key-value store."""
        return self.model_dump(mode="json", by_alias=True)
