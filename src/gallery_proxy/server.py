"""
FastAPI application serving paginated gallery pages.

Endpoints:
- GET /        authenticated; refreshes the snapshot and computes missing pages
- GET /dev     authenticated; serves only what is already cached
- GET /health  liveness probe
"""

from __future__ import annotations

import secrets
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, Query, Request, Response
from fastapi.responses import JSONResponse
from loguru import logger

from .config import Settings, settings
from .errors import AuthError, GalleryError, NormalizationError, UpstreamError
from .gallery import ImageNormalizer, PageCacheController
from .store import KeyValueStore, create_kv_store
from .upstream import AssetProvider, create_asset_provider


class GalleryService:
    """Holds the provider, store and controller; components are created lazily."""

    def __init__(
        self,
        app_settings: Settings,
        provider: AssetProvider | None = None,
        store: KeyValueStore | None = None,
    ):
        self.settings = app_settings
        self._provider = provider
        self._store = store
        self._controller: PageCacheController | None = None

    @property
    def provider(self) -> AssetProvider:
        """Get or create the asset provider."""
        if self._provider is None:
            logger.debug("Initializing asset provider for cloud {}", self.settings.cloudinary_cloud_name)
            self._provider = create_asset_provider(
                provider_type="cloudinary",
                cloud_name=self.settings.cloudinary_cloud_name,
                api_key=self.settings.cloudinary_api_key,
                api_secret=self.settings.cloudinary_api_secret,
                folder=self.settings.cloudinary_folder_prefix,
                detail_lookup=self.settings.cloudinary_detail_lookup,
                timeout=self.settings.upstream_timeout,
            )
            logger.info("Asset provider initialized successfully")
        return self._provider

    @property
    def store(self) -> KeyValueStore:
        """Get or create the key-value store."""
        if self._store is None:
            logger.debug(
                "Initializing key-value store: {} at {}",
                self.settings.kv_store_type,
                self.settings.kv_store_path,
            )
            self._store = create_kv_store(
                store_type=self.settings.kv_store_type,
                path=self.settings.kv_path,
            )
            logger.info("Key-value store initialized successfully")
        return self._store

    @property
    def controller(self) -> PageCacheController:
        """Get or create the page cache controller."""
        if self._controller is None:
            normalizer = ImageNormalizer(
                self.provider,
                cdn_base_url=self.settings.cdn_base_url,
                strict=self.settings.strict_normalization,
            )
            self._controller = PageCacheController(
                provider=self.provider,
                store=self.store,
                normalizer=normalizer,
                cache_key=self.settings.cache_key_name,
                default_per_page=self.settings.per_page,
                max_per_page=self.settings.max_per_page,
                shuffle=self.settings.shuffle_images,
                max_cached_page_sizes=self.settings.max_cached_page_sizes,
            )
        return self._controller

    async def close(self) -> None:
        """Release upstream connections."""
        if self._provider is not None:
            await self._provider.aclose()


def get_service(request: Request) -> GalleryService:
    """Return the service attached to the running application."""
    return request.app.state.gallery_service


def require_api_key(
    request: Request,
    x_api_key: str | None = Header(default=None),
) -> None:
    """
    Check the X-API-Key header against the configured secret.

    Development mode skips the check. An empty configured secret never matches.

    Raises:
        AuthError: If the key is missing or wrong
    """
    app_settings = get_service(request).settings
    if app_settings.is_development:
        return

    expected = app_settings.api_secret_key
    if not expected or x_api_key is None:
        raise AuthError()
    if not secrets.compare_digest(x_api_key.encode(), expected.encode()):
        raise AuthError()


def _is_forced(force: str | None) -> bool:
    return force is not None and force.lower() == "true"


def create_app(
    app_settings: Settings | None = None,
    provider: AssetProvider | None = None,
    store: KeyValueStore | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        app_settings: Settings to use; the global settings when None
        provider: Asset provider override (tests)
        store: Key-value store override (tests)

    Returns:
        Configured FastAPI application
    """
    service = GalleryService(app_settings or settings, provider=provider, store=store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await service.close()

    app = FastAPI(title="gallery-proxy", lifespan=lifespan)
    app.state.gallery_service = service

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception("Unhandled error on {} {}", request.method, request.url.path)
            response = JSONResponse(status_code=500, content={"error": str(e)})
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "{} {} -> {} ({:.1f} ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError):
        logger.warning("Rejected request to {}: {}", request.url.path, exc.message)
        return JSONResponse(status_code=401, content=exc.to_dict())

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        logger.error("Upstream error (status {}): {}", exc.status, exc.message)
        return JSONResponse(status_code=502, content=exc.to_dict())

    @app.exception_handler(NormalizationError)
    async def handle_normalization_error(request: Request, exc: NormalizationError):
        return JSONResponse(status_code=500, content=exc.to_dict())

    @app.exception_handler(GalleryError)
    async def handle_gallery_error(request: Request, exc: GalleryError):
        logger.error("Gallery error: {}", exc.message)
        return JSONResponse(status_code=500, content=exc.to_dict())

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/", dependencies=[Depends(require_api_key)])
    async def list_images(
        response: Response,
        page: int = Query(1, description="1-based page number"),
        per_page: int | None = Query(None, ge=1, description="Page size override"),
        force: str | None = Query(None, description="'true' forces a snapshot refresh"),
        gallery: GalleryService = Depends(get_service),
    ):
        logger.info("Gallery request: page={}, per_page={}, force={}", page, per_page, force)
        result = await gallery.controller.get_page(
            page=page,
            per_page=per_page,
            force=_is_forced(force),
        )
        max_age = gallery.settings.cache_max_age
        if max_age > 0:
            response.headers["Cache-Control"] = f"max-age={max_age}"
        return result.to_response()

    @app.get("/dev", dependencies=[Depends(require_api_key)])
    async def list_cached_images(
        page: int = Query(1, description="1-based page number"),
        per_page: int | None = Query(None, ge=1, description="Page size override"),
        gallery: GalleryService = Depends(get_service),
    ):
        logger.info("Cached gallery request: page={}, per_page={}", page, per_page)
        result = await gallery.controller.get_cached_page(page=page, per_page=per_page)
        return result.to_response()

    return app
