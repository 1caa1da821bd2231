"""
Page cache controller.

Decides per request whether the cached folder snapshot is stale, serves
cached pages when they were computed against the current snapshot, and
computes (then stores) the ones that are missing.
"""

import asyncio
import hashlib
import json
import math
import random

from loguru import logger
from pydantic import ValidationError

from ..store.base import KeyValueStore
from ..upstream.base import AssetProvider, FolderListing
from .models import CACHE_VERSION, GalleryCacheRecord, GalleryPage, NormalizedImage, Pagination
from .normalizer import ImageNormalizer

DEFAULT_PER_PAGE = 40
MAX_PER_PAGE = 500
MAX_CACHED_PAGE_SIZES = 4


def snapshot_hash(listing: FolderListing) -> str:
    """Hash the canonical JSON of a listing. Resource order is significant."""
    payload = json.dumps(
        listing.model_dump(mode="json"),
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode()).hexdigest()


def paginate(total_items: int, page: int, per_page: int) -> tuple[Pagination, slice | None]:
    """
    Compute pagination metadata and the index range of a page.

    Returns:
        Tuple of (pagination, slice). The slice is None when the page is
        outside ``[1, total_pages]``.
    """
    total_pages = math.ceil(total_items / per_page) if per_page > 0 else 0
    pagination = Pagination(
        current_page=page,
        per_page=per_page,
        total_pages=total_pages,
        total_items=total_items,
    )
    if page < 1 or page > total_pages:
        return pagination, None
    start = (page - 1) * per_page
    return pagination, slice(start, start + per_page)


async def read_cache_record(store: KeyValueStore, cache_key: str) -> GalleryCacheRecord | None:
    """Read the cached record. Unreadable or outdated records count as missing."""
    data = await store.get(cache_key)
    if data is None:
        return None
    try:
        record = GalleryCacheRecord.model_validate(data)
    except ValidationError as e:
        logger.warning("Discarding unreadable cache record {}: {}", cache_key, e)
        return None
    if record.version != CACHE_VERSION:
        logger.info(
            "Discarding cache record {} with version {} (expected {})",
            cache_key,
            record.version,
            CACHE_VERSION,
        )
        return None
    return record


class PageCacheController:
    """Orchestrates fetch, invalidation, normalization and storage of gallery pages."""

    def __init__(
        self,
        provider: AssetProvider,
        store: KeyValueStore,
        normalizer: ImageNormalizer,
        cache_key: str,
        default_per_page: int = DEFAULT_PER_PAGE,
        max_per_page: int = MAX_PER_PAGE,
        shuffle: bool = False,
        max_cached_page_sizes: int = MAX_CACHED_PAGE_SIZES,
    ):
        self.provider = provider
        self.store = store
        self.normalizer = normalizer
        self.cache_key = cache_key
        self.default_per_page = default_per_page
        self.max_per_page = max_per_page
        self.shuffle = shuffle
        self.max_cached_page_sizes = max_cached_page_sizes

    def resolve_per_page(self, per_page: int | None) -> int:
        """Apply the default page size and clamp to ``[1, max_per_page]``."""
        if per_page is None:
            per_page = self.default_per_page
        return max(1, min(self.max_per_page, per_page))

    async def load_record(self) -> GalleryCacheRecord | None:
        """Read this controller's cache record, or None if absent or unusable."""
        return await read_cache_record(self.store, self.cache_key)

    async def _current_record(self, force: bool) -> tuple[GalleryCacheRecord, bool]:
        """
        Fetch the listing and the cached record, invalidating when needed.

        Returns:
            Tuple of (record, invalidated)
        """
        record, listing = await asyncio.gather(
            self.load_record(),
            self.provider.fetch_folder_listing(),
        )
        current_hash = snapshot_hash(listing)
        changed = record is None or record.snapshot_hash != current_hash

        if force or changed:
            logger.info(
                "Invalidating gallery cache (force={}, changed={}, resources={})",
                force,
                changed,
                len(listing.resources),
            )
            return GalleryCacheRecord(snapshot_hash=current_hash, snapshot=listing), True

        return record, False

    async def _ensure_page(
        self, record: GalleryCacheRecord, page: int, per_page: int
    ) -> tuple[list[NormalizedImage], Pagination, bool]:
        """
        Return the images of a page, computing them on a cache miss.

        Returns:
            Tuple of (images, pagination, computed)
        """
        pagination, index_range = paginate(record.total_items, page, per_page)
        if index_range is None:
            logger.debug(
                "Page {} out of range (total_pages={})", page, pagination.total_pages
            )
            return [], pagination, False

        cached = record.get_page(per_page, page)
        if cached is not None:
            logger.debug("Cache hit for page {} (per_page={})", page, per_page)
            return cached, pagination, False

        logger.info("Cache miss for page {} (per_page={}), normalizing", page, per_page)
        resources = record.snapshot.resources[index_range]
        images = await self.normalizer.normalize_batch(resources)
        if len(images) < len(resources):
            # Incomplete pages are served but retried on the next request
            logger.warning(
                "Not caching page {} (per_page={}): {} of {} resources normalized",
                page,
                per_page,
                len(images),
                len(resources),
            )
            return images, pagination, False

        record.set_page(per_page, page, images, max_page_sizes=self.max_cached_page_sizes)
        return images, pagination, True

    async def get_page(
        self,
        page: int = 1,
        per_page: int | None = None,
        force: bool = False,
    ) -> GalleryPage:
        """
        Serve one page, refreshing the snapshot and computing the page if needed.

        Args:
            page: 1-based page number
            per_page: Page size; the configured default when None
            force: Discard all cached pages even if the listing is unchanged

        Returns:
            The page of images with pagination metadata

        Raises:
            UpstreamError: If the folder listing cannot be fetched
            NormalizationError: If a detail fetch fails in strict mode
        """
        per_page = self.resolve_per_page(per_page)
        record, invalidated = await self._current_record(force)
        images, pagination, computed = await self._ensure_page(record, page, per_page)

        if invalidated or computed:
            await self.store.put(self.cache_key, record.to_store())
            logger.debug("Saved cache record {} ({} pages)", self.cache_key, record.page_count)

        return self._build_page(images, pagination)

    async def get_cached_page(self, page: int = 1, per_page: int | None = None) -> GalleryPage:
        """
        Serve one page from the cache only: no upstream call, no write.

        A missing record yields an empty page with zero totals.
        """
        per_page = self.resolve_per_page(per_page)
        record = await self.load_record()
        if record is None:
            pagination, _ = paginate(0, page, per_page)
            return GalleryPage(images=[], pagination=pagination)

        pagination, index_range = paginate(record.total_items, page, per_page)
        images = record.get_page(per_page, page) if index_range is not None else None
        return self._build_page(images or [], pagination)

    async def warm(self, per_page: int | None = None, force: bool = False) -> int:
        """
        Compute every missing page of the current listing and store them.

        Returns:
            Number of pages computed
        """
        per_page = self.resolve_per_page(per_page)
        record, invalidated = await self._current_record(force)
        pagination, _ = paginate(record.total_items, 1, per_page)

        computed_pages = 0
        for page in range(1, pagination.total_pages + 1):
            _, _, computed = await self._ensure_page(record, page, per_page)
            computed_pages += int(computed)

        if invalidated or computed_pages:
            await self.store.put(self.cache_key, record.to_store())
        logger.info("Warmed {} pages (per_page={})", computed_pages, per_page)
        return computed_pages

    def _build_page(self, images: list[NormalizedImage], pagination: Pagination) -> GalleryPage:
        if self.shuffle:
            images = random.sample(images, len(images))
        return GalleryPage(images=list(images), pagination=pagination)
