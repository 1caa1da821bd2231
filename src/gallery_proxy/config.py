"""Configuration management using pydantic-settings.

Loads from environment variables and .env file.
"""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Attributes:
        api_secret_key: Shared secret expected in the X-API-Key header.
        environment: "production" or "development". Development skips auth.
        cloudinary_cloud_name: Cloudinary account (cloud) name.
        cloudinary_api_key: Cloudinary Admin API key.
        cloudinary_api_secret: Cloudinary Admin API secret.
        cloudinary_folder_prefix: Asset folder whose images are served.
        cloudinary_detail_lookup: Identifier used for the detail endpoint,
            either "asset_id" or "public_id".
        upstream_timeout: HTTP timeout for Cloudinary calls in seconds.
        cdn_base_url: Base URL that derived image URLs point to.
        kv_store_type: Key-value store backend, either "file" or "memory".
        kv_store_path: Directory for the file-backed store.
        cache_key_name: Key of the gallery cache record.
        per_page: Default page size.
        max_per_page: Upper bound for a request-supplied page size.
        strict_normalization: Abort the page on the first detail failure.
        shuffle_images: Shuffle the images of each response.
        max_cached_page_sizes: Number of distinct page sizes kept in the cache record.
        cache_max_age: max-age in seconds of the Cache-Control header on gallery
            responses; 0 disables the header.
        host: Server bind address.
        port: Server bind port.
        debug: Enable debug mode.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Output logs in JSON format for production.
        log_file: Optional path of a rotating log file.

    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Inbound auth
    api_secret_key: str = ""
    environment: str = "production"  # production | development

    # Cloudinary
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_folder_prefix: str = ""
    cloudinary_detail_lookup: Literal["asset_id", "public_id"] = "asset_id"
    upstream_timeout: int = 30

    # Presentation
    cdn_base_url: str = "https://images.slovyagin.com"

    # Key-value store
    kv_store_type: str = "file"  # file | memory
    kv_store_path: str = "./data/kv"
    cache_key_name: str = "homepage-gallery"

    # Pagination and normalization
    per_page: int = 40
    max_per_page: int = 500
    strict_normalization: bool = True
    shuffle_images: bool = False
    max_cached_page_sizes: int = 4

    # HTTP caching
    cache_max_age: int = 36000

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: str | None = None

    @property
    def is_development(self) -> bool:
        """Return True when running in development mode (auth bypassed)."""
        return self.environment.lower() == "development"

    @property
    def kv_path(self) -> Path:
        """Return the key-value store directory as a Path object.

        Returns:
            Path: Resolved path to the key-value store directory.

        """
        return Path(self.kv_store_path)


# Global settings instance
settings = Settings()
