"""
URL and color helpers for presenting Cloudinary images.

Both functions are pure: no I/O, no exceptions for string input.
"""

import re
from typing import Literal
from urllib.parse import parse_qs, urlencode, urlsplit

from PIL import ImageColor

DEFAULT_CDN_BASE_URL = "https://images.slovyagin.com"

# Pixel targets for the three derived URLs
MOBILE_SIZE = 800
BASELINE_SIZE = 1280
LARGE_SIZE = 1400

# Perceived luminance above this value (0-255 scale) counts as light
LUMINANCE_THRESHOLD = 186

_HEX_COLOR = re.compile(r"#?([0-9a-f]{3}|[0-9a-f]{6})", re.IGNORECASE)
_EXTENSION = re.compile(r"\.[^/.]+$")


def derive_url(
    secure_url: str,
    size: int | None = None,
    cdn_base_url: str = DEFAULT_CDN_BASE_URL,
) -> str:
    """
    Rewrite a Cloudinary delivery URL to the CDN host at a given pixel size.

    The file name keeps its stem but always gets the ``.avif`` extension.
    The ``_a`` analytics parameter is carried over when present.

    Args:
        secure_url: Original https URL from the asset provider
        size: Target width and height in pixels; falsy means no size params
        cdn_base_url: Host (and optional path prefix) of the CDN

    Returns:
        The rewritten URL
    """
    try:
        parts = urlsplit(secure_url)
        path, query = parts.path, parts.query
    except ValueError:
        # Malformed netloc, e.g. an unclosed IPv6 bracket
        path, _, query = secure_url.partition("?")
    file_name = path.split("/")[-1]
    file_name = _EXTENSION.sub(".avif", file_name)

    params: list[tuple[str, str]] = []
    a_param = parse_qs(query).get("_a", [""])[0]
    if a_param:
        params.append(("_a", a_param))
    if size:
        params.append(("h", str(size)))
        params.append(("w", str(size)))

    url = f"{cdn_base_url.rstrip('/')}/{file_name}"
    if params:
        url += "?" + urlencode(params)
    return url


def is_light(hex_color: str) -> bool:
    """
    Return True if a hex color is light enough to need dark text on top.

    Uses the weighted luminance 0.299 R + 0.587 G + 0.114 B against a
    threshold of 186. Input that is not a 3- or 6-digit hex color
    (with or without ``#``) is never light.
    """
    match = _HEX_COLOR.fullmatch(hex_color or "")
    if not match:
        return False

    r, g, b = ImageColor.getrgb("#" + match.group(1).lower())[:3]
    return r * 0.299 + g * 0.587 + b * 0.114 > LUMINANCE_THRESHOLD


def text_color(background: str) -> Literal["black", "white"]:
    """Pick the overlay text color with the best contrast on ``background``."""
    return "black" if is_light(background) else "white"
