"""Pytest fixtures and configuration for gallery-proxy tests.

This module provides a fake asset provider, sample resources, stores,
controllers and a configured FastAPI test client.
"""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from gallery_proxy.config import Settings
from gallery_proxy.errors import UpstreamError
from gallery_proxy.gallery import ImageNormalizer, PageCacheController
from gallery_proxy.server import create_app
from gallery_proxy.store import MemoryKeyValueStore
from gallery_proxy.upstream.base import AssetProvider, FolderListing, RawResource

TEST_API_KEY = "test-secret"
CACHE_KEY = "test-gallery"


def make_resource(index: int, caption: str | None = None) -> RawResource:
    """Build a listing entry with a predictable asset id and URL."""
    context = {"custom": {"caption": caption}} if caption else None
    return RawResource(
        asset_id=f"{index:04d}abcdef",
        public_id=f"homepage/photo-{index}",
        secure_url=f"https://res.cloudinary.com/demo/image/upload/v1/homepage/photo-{index}.jpg",
        width=1600,
        height=1200,
        context=context,
    )


class FakeAssetProvider(AssetProvider):
    """In-memory provider recording every call."""

    def __init__(self, resources: list[RawResource] | None = None):
        self.resources = list(resources or [])
        self.listing_calls = 0
        self.detail_calls: list[str] = []
        self.failing_assets: set[str] = set()
        self.listing_error: UpstreamError | None = None
        self.closed = False

    async def fetch_folder_listing(self) -> FolderListing:
        self.listing_calls += 1
        if self.listing_error:
            raise self.listing_error
        return FolderListing(resources=list(self.resources))

    async def fetch_resource_detail(self, resource: RawResource) -> RawResource:
        self.detail_calls.append(resource.asset_id)
        if resource.asset_id in self.failing_assets:
            raise UpstreamError(404, "Cloudinary resource details error: Not Found")
        return resource.model_copy(
            update={
                "colors": [
                    ["#112233", 40.1],
                    ["#445566", 20.0],
                    ["#778899", 10.0],
                    ["#EEEEEE", 5.0],
                ]
            }
        )

    async def aclose(self) -> None:
        self.closed = True


# --- Temporary Directory Fixtures ---


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


# --- Sample Data Fixtures ---


@pytest.fixture
def sample_resources() -> list[RawResource]:
    """Create 85 listing entries (3 pages of 40)."""
    return [make_resource(i) for i in range(85)]


@pytest.fixture
def fake_provider(sample_resources) -> FakeAssetProvider:
    """Create a fake provider serving the sample resources."""
    return FakeAssetProvider(sample_resources)


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    """Create an empty in-memory key-value store."""
    return MemoryKeyValueStore()


@pytest.fixture
def controller(fake_provider, memory_store) -> PageCacheController:
    """Create a page cache controller over the fake provider."""
    return PageCacheController(
        provider=fake_provider,
        store=memory_store,
        normalizer=ImageNormalizer(fake_provider),
        cache_key=CACHE_KEY,
        default_per_page=40,
    )


# --- Settings and App Fixtures ---


@pytest.fixture
def test_settings() -> Settings:
    """Settings for a production-mode app with an in-memory store."""
    return Settings(
        api_secret_key=TEST_API_KEY,
        environment="production",
        cloudinary_cloud_name="demo",
        cloudinary_api_key="key",
        cloudinary_api_secret="secret",
        cloudinary_folder_prefix="homepage",
        kv_store_type="memory",
        cache_key_name=CACHE_KEY,
        per_page=40,
        shuffle_images=False,
        strict_normalization=True,
    )


@pytest.fixture
def client(test_settings, fake_provider, memory_store) -> Generator[TestClient, None, None]:
    """Create a test client for the app wired to the fakes."""
    app = create_app(test_settings, provider=fake_provider, store=memory_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Headers carrying the configured API key."""
    return {"X-API-Key": TEST_API_KEY}
