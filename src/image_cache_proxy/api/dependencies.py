"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Settings (and optional test doubles) stored in app.state by create_app
    - Layers built from them during lifespan
    - Dependency functions retrieve from request.app.state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from image_cache_proxy.config import Settings
from image_cache_proxy.handlers import ImageHandler
from image_cache_proxy.protocols import BlobStore, OriginFetcher
from image_cache_proxy.repositories import FileBlobStore, HttpOriginFetcher
from image_cache_proxy.services import ImageCacheService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> ImageHandler:
    """Dependency injection for ImageHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "image_handler", None)
    if handler is None:
        raise RuntimeError("ImageHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores them in app.state:
    1. Store and origin fetcher - taken from app.state when injected, else built from settings
    2. Service (business logic) - app.state.cache_service
    3. Handler (HTTP endpoints) - app.state.image_handler

    Raises:
        StoreIOError: If the cache directory cannot be created
    """
    settings: Settings = app.state.settings

    store: BlobStore = app.state.store or FileBlobStore.create(settings.cache_dir)
    origin: OriginFetcher = app.state.origin or HttpOriginFetcher.create(settings)

    cache_service = ImageCacheService.create(store=store, origin=origin)
    app.state.cache_service = cache_service
    app.state.image_handler = ImageHandler(
        cache_service=cache_service,
        max_body_bytes=settings.max_body_bytes,
    )

    logger.info(f"Caching directory: {settings.cache_dir} ({await cache_service.count()} entries)")
    logger.info(f"Origin: {settings.origin_base_url} (timeout {settings.origin_timeout}s)")

    yield

    await cache_service.drain()
    await origin.aclose()
    del app.state.image_handler
    del app.state.cache_service
    logger.info("Image cache proxy shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[ImageHandler, Depends(get_handler)]
