"""
Tests for configuration module.

Tests Settings class, environment variable loading, and property methods.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from gallery_proxy.config import Settings


class TestSettings:
    """Test Settings class."""

    def test_default_values(self, monkeypatch):
        """Test that default values are set correctly."""
        # Clear env vars that might override defaults from .env file
        names = (
            "ENVIRONMENT",
            "PER_PAGE",
            "KV_STORE_TYPE",
            "CDN_BASE_URL",
            "CACHE_MAX_AGE",
            "LOG_FILE",
        )
        for name in names:
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.environment == "production"
        assert settings.cloudinary_detail_lookup == "asset_id"
        assert settings.cdn_base_url == "https://images.slovyagin.com"
        assert settings.kv_store_type == "file"
        assert settings.cache_key_name == "homepage-gallery"
        assert settings.per_page == 40
        assert settings.max_per_page == 500
        assert settings.strict_normalization is True
        assert settings.shuffle_images is False
        assert settings.max_cached_page_sizes == 4
        assert settings.cache_max_age == 36000
        assert settings.host == "0.0.0.0"
        assert settings.port == 8000
        assert settings.log_level == "INFO"
        assert settings.log_json is False
        assert settings.log_file is None

    def test_kv_path_property(self):
        """Test kv_path property returns Path object."""
        settings = Settings(kv_store_path="./data/kv")

        assert isinstance(settings.kv_path, Path)
        assert str(settings.kv_path) == "data/kv"

    @pytest.mark.parametrize(
        "environment,expected",
        [
            ("development", True),
            ("Development", True),
            ("production", False),
            ("staging", False),
        ],
    )
    def test_is_development(self, environment, expected):
        """Test development mode detection is case-insensitive."""
        settings = Settings(environment=environment)

        assert settings.is_development is expected

    def test_detail_lookup_choices(self):
        """Test only asset_id and public_id are accepted."""
        assert Settings(cloudinary_detail_lookup="public_id").cloudinary_detail_lookup == "public_id"

        with pytest.raises(ValidationError):
            Settings(cloudinary_detail_lookup="filename")

    def test_empty_secret_allowed(self):
        """Test that an empty API secret is allowed (every request is rejected)."""
        settings = Settings(api_secret_key="")

        assert settings.api_secret_key == ""


class TestSettingsFromEnv:
    """Test Settings loading from environment variables."""

    def test_load_from_env(self, monkeypatch):
        """Test loading settings from environment variables."""
        monkeypatch.setenv("API_SECRET_KEY", "env-secret")
        monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
        monkeypatch.setenv("CLOUDINARY_FOLDER_PREFIX", "homepage")
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        settings = Settings()

        assert settings.api_secret_key == "env-secret"
        assert settings.cloudinary_cloud_name == "demo"
        assert settings.cloudinary_folder_prefix == "homepage"
        assert settings.port == 9000
        assert settings.log_level == "WARNING"

    def test_env_overrides_defaults(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("KV_STORE_TYPE", "memory")
        monkeypatch.setenv("STRICT_NORMALIZATION", "false")
        monkeypatch.setenv("SHUFFLE_IMAGES", "true")
        monkeypatch.setenv("PER_PAGE", "24")

        settings = Settings()

        assert settings.kv_store_type == "memory"
        assert settings.strict_normalization is False
        assert settings.shuffle_images is True
        assert settings.per_page == 24
