from fastapi import FastAPI, Request, status
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from image_cache_proxy import __version__
from image_cache_proxy.api.dependencies import HandlerDep, lifespan
from image_cache_proxy.config import Settings, get_settings
from image_cache_proxy.handlers import method_not_allowed, not_found, text_response
from image_cache_proxy.protocols import BlobStore, OriginFetcher

# Methods routed to the handler; anything else is rejected by the router
# and converted to the same plain-text 405 below.
ROUTE_METHODS = ["GET", "PUT", "DELETE", "POST", "PATCH", "HEAD", "OPTIONS"]


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Render router-level HTTP errors as plain text."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return method_not_allowed()
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return not_found()
    return text_response(exc.status_code, str(exc.detail))


def create_app(
    settings: Settings | None = None,
    store: BlobStore | None = None,
    origin: OriginFetcher | None = None,
) -> FastAPI:
    """Build the image cache proxy application.

    Args:
        settings: Immutable configuration. Defaults to environment settings.
        store: Optional store to use instead of a FileBlobStore over settings.cache_dir.
        origin: Optional origin fetcher to use instead of an HttpOriginFetcher.

    Returns:
        The FastAPI application
    """
    # Docs routes are disabled so every path is available as a cache key
    app = FastAPI(
        title="Image Cache Proxy",
        description="Local caching proxy for origin images",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings or get_settings()
    app.state.store = store
    app.state.origin = origin

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    @app.api_route("/{code:path}", methods=ROUTE_METHODS)
    async def image(request: Request, handler: HandlerDep) -> Response:
        """Serve, store or delete the image named by the path."""
        return await handler.handle(request)

    return app
