"""
Turns raw asset descriptors into presentation-ready image records.
"""

import re

from loguru import logger

from ..errors import NormalizationError, UpstreamError
from ..transform import (
    BASELINE_SIZE,
    DEFAULT_CDN_BASE_URL,
    LARGE_SIZE,
    MOBILE_SIZE,
    derive_url,
    text_color,
)
from ..upstream.base import AssetProvider, RawResource
from .models import NormalizedImage

TRANSPARENT = "transparent"
BACKGROUND_SWATCH_INDEX = 3
SHORT_ID_LENGTH = 4

_SLUG_SEPARATORS = re.compile(r", | ")


def background_color(colors: list[list] | None) -> str:
    """Return the 4th dominant swatch lower-cased, or 'transparent' if there are fewer."""
    if not colors or len(colors) <= BACKGROUND_SWATCH_INDEX:
        return TRANSPARENT
    swatch = colors[BACKGROUND_SWATCH_INDEX]
    if not swatch:
        return TRANSPARENT
    return str(swatch[0]).lower()


def image_id(caption: str | None, asset_id: str) -> str:
    """Build a stable id from the caption slug and the first characters of the asset id."""
    short_id = asset_id[:SHORT_ID_LENGTH]
    if not caption:
        return f"p-{short_id}"
    slug = _SLUG_SEPARATORS.sub("-", caption.lower())
    return f"{slug}-{short_id}"


def normalize_resource(
    resource: RawResource,
    detail: RawResource | None = None,
    cdn_base_url: str = DEFAULT_CDN_BASE_URL,
) -> NormalizedImage:
    """
    Map a raw resource (and its fetched detail) to a NormalizedImage.

    Fields present on ``detail`` take precedence over the listing entry.

    Args:
        resource: Entry from the folder listing
        detail: Detail payload for the same asset, if fetched
        cdn_base_url: CDN host the derived URLs point to

    Returns:
        The normalized image
    """
    detail = detail or resource
    secure_url = detail.secure_url or resource.secure_url
    caption = detail.caption or resource.caption
    asset_id = detail.asset_id or resource.asset_id
    bg = background_color(detail.colors or resource.colors)

    return NormalizedImage(
        id=image_id(caption, asset_id),
        url=derive_url(secure_url, BASELINE_SIZE, cdn_base_url),
        mobile_url=derive_url(secure_url, MOBILE_SIZE, cdn_base_url),
        large_url=derive_url(secure_url, LARGE_SIZE, cdn_base_url),
        background_color=bg,
        color=text_color(bg),
        width=detail.width or resource.width or 0,
        height=detail.height or resource.height or 0,
        caption=caption,
    )


class ImageNormalizer:
    """Normalizes batches of resources, fetching each detail one at a time."""

    def __init__(
        self,
        provider: AssetProvider,
        cdn_base_url: str = DEFAULT_CDN_BASE_URL,
        strict: bool = True,
    ):
        """
        Initialize the normalizer.

        Args:
            provider: Upstream used for detail fetches
            cdn_base_url: CDN host the derived URLs point to
            strict: Abort the batch on the first failure instead of skipping the item
        """
        self.provider = provider
        self.cdn_base_url = cdn_base_url
        self.strict = strict

    async def normalize_batch(self, resources: list[RawResource]) -> list[NormalizedImage]:
        """
        Fetch detail for each resource sequentially and normalize it.

        Args:
            resources: Listing entries, in display order

        Returns:
            Normalized images in the same order. In best-effort mode, failed
            items are left out.

        Raises:
            NormalizationError: In strict mode, on the first detail fetch failure
        """
        images: list[NormalizedImage] = []
        logger.debug("Normalizing {} resources (strict={})", len(resources), self.strict)

        for resource in resources:
            try:
                detail = await self.provider.fetch_resource_detail(resource)
            except UpstreamError as e:
                if self.strict:
                    logger.error("Detail fetch failed for {}: {}", resource.asset_id, e)
                    raise NormalizationError(resource.asset_id, e) from e
                logger.warning("Skipping resource {}: {}", resource.asset_id, e)
                continue

            images.append(normalize_resource(resource, detail, self.cdn_base_url))

        logger.debug("Normalized {} of {} resources", len(images), len(resources))
        return images
