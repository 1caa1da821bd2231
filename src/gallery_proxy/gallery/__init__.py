"""
Gallery package.

Normalizes upstream resources into image records and serves paginated,
cached pages of them.
"""

from .controller import PageCacheController, paginate, read_cache_record, snapshot_hash
from .models import GalleryCacheRecord, GalleryPage, NormalizedImage, Pagination
from .normalizer import ImageNormalizer, normalize_resource

__all__ = [
    "GalleryCacheRecord",
    "GalleryPage",
    "ImageNormalizer",
    "NormalizedImage",
    "PageCacheController",
    "Pagination",
    "normalize_resource",
    "paginate",
    "read_cache_record",
    "snapshot_hash",
]
