"""Asset provider package.

Provides a factory function to create the configured upstream provider.
"""

from .base import AssetProvider, FolderListing, RawResource
from .cloudinary import CloudinaryProvider


def create_asset_provider(provider_type: str = "cloudinary", **kwargs) -> AssetProvider:
    """Create an asset provider instance.

    Args:
        provider_type: Type of provider (only "cloudinary" today)
        **kwargs: Provider-specific arguments (credentials, folder, ...)

    Returns:
        Configured AssetProvider instance

    Raises:
        ValueError: If provider_type is not recognized or credentials are missing

    """
    if provider_type == "cloudinary":
        return CloudinaryProvider(**kwargs)
    else:
        raise ValueError(f"Unknown asset provider: {provider_type}")


__all__ = [
    "AssetProvider",
    "FolderListing",
    "RawResource",
    "CloudinaryProvider",
    "create_asset_provider",
]
