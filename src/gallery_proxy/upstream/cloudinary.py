"""
Cloudinary Admin API provider.

Lists an asset folder and fetches per-resource color/metadata detail.
"""

from typing import Any, Literal
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import ValidationError

from ..errors import UpstreamError
from .base import AssetProvider, FolderListing, RawResource

API_BASE_URL = "https://api.cloudinary.com/v1_1"
MAX_RESULTS = 500


class CloudinaryProvider(AssetProvider):
    """Asset provider backed by the Cloudinary Admin API.

    Requests are authenticated with HTTP Basic auth built from the API
    key and secret. Failures are never retried.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str,
        detail_lookup: Literal["asset_id", "public_id"] = "asset_id",
        timeout: int = 30,
        base_url: str = API_BASE_URL,
    ):
        """
        Initialize the provider.

        Args:
            cloud_name: Cloudinary account name
            api_key: Admin API key
            api_secret: Admin API secret
            folder: Asset folder to list
            detail_lookup: Identifier the detail endpoint is addressed by
            timeout: HTTP request timeout in seconds
            base_url: Admin API root, overridable for tests

        Raises:
            ValueError: If the cloud name or credentials are empty
        """
        if not cloud_name:
            raise ValueError("Cloudinary cloud name is required")
        if not api_key or not api_secret:
            raise ValueError("Cloudinary API key and secret are required")

        self.cloud_name = cloud_name
        self.folder = folder
        self.detail_lookup = detail_lookup
        self.timeout = timeout
        self.base_url = f"{base_url.rstrip('/')}/{cloud_name}"
        self._auth = httpx.BasicAuth(api_key, api_secret)
        self._client: httpx.AsyncClient | None = None
        logger.debug(
            "CloudinaryProvider initialized: cloud={}, folder={}, lookup={}",
            cloud_name,
            folder,
            detail_lookup,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Create the HTTP client on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                auth=self._auth,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def fetch_folder_listing(self) -> FolderListing:
        """Fetch up to 500 resources of the folder with context and metadata."""
        params = {
            "asset_folder": self.folder,
            "max_results": str(MAX_RESULTS),
            "context": "true",
            "metadata": "true",
        }
        logger.debug("Fetching folder listing: {}", self.folder)
        data = await self._get("/resources/by_asset_folder", params, "Cloudinary API error")

        try:
            listing = FolderListing.model_validate(data)
        except ValidationError as e:
            raise UpstreamError(502, f"Cloudinary API error: invalid listing payload ({e})") from e

        logger.info("Fetched {} resources from folder {}", len(listing.resources), self.folder)
        return listing

    async def fetch_resource_detail(self, resource: RawResource) -> RawResource:
        """Fetch colors and media metadata for one resource."""
        if self.detail_lookup == "public_id":
            path = f"/resources/image/upload/{quote(resource.public_id, safe='/')}"
        else:
            path = f"/resources/{quote(resource.asset_id, safe='')}"

        params = {"colors": "1", "media_metadata": "1"}
        logger.debug("Fetching resource detail: {}", path)
        data = await self._get(path, params, "Cloudinary resource details error")

        try:
            return RawResource.model_validate(data)
        except ValidationError as e:
            raise UpstreamError(
                502, f"Cloudinary resource details error: invalid payload ({e})"
            ) from e

    async def _get(self, path: str, params: dict[str, str], error_prefix: str) -> Any:
        """Issue a GET request and decode the JSON body, mapping failures to UpstreamError."""
        try:
            response = await self.client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.warning("Cloudinary request failed: {} - {}", path, e)
            raise UpstreamError(502, f"{error_prefix}: {e}") from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning("Cloudinary returned {} for {}: {}", response.status_code, path, message)
            raise UpstreamError(response.status_code, f"{error_prefix}: {message}")

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(502, f"{error_prefix}: invalid JSON body") from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _error_message(response: httpx.Response) -> str:
    """Extract Cloudinary's error message, falling back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"
