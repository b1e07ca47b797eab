"""HTTP handlers for image cache operations.

Handlers convert between HTTP requests and service calls. They own the
status codes and the plain-text bodies; no error detail, path or stack
trace ever reaches a response body.
"""

import logging

from fastapi import Request, status
from fastapi.responses import PlainTextResponse, Response

from image_cache_proxy.entities import CacheKey
from image_cache_proxy.errors import (
    CacheMissError,
    InvalidKeyError,
    OriginUnavailableError,
    PayloadTooLargeError,
    StoreIOError,
    UnsupportedMethodError,
)
from image_cache_proxy.services import ImageCacheService

logger = logging.getLogger(__name__)

IMAGE_MEDIA_TYPE = "image/jpeg"

# Starlette renamed HTTP_413_REQUEST_ENTITY_TOO_LARGE, so the code is pinned here
HTTP_413_PAYLOAD_TOO_LARGE = 413


def text_response(status_code: int, body: str) -> PlainTextResponse:
    """Build a ``text/plain`` response naming the outcome."""
    return PlainTextResponse(body, status_code=status_code)


def bad_request() -> PlainTextResponse:
    return text_response(status.HTTP_400_BAD_REQUEST, "Bad Request")


def not_found() -> PlainTextResponse:
    return text_response(status.HTTP_404_NOT_FOUND, "Not Found")


def method_not_allowed() -> PlainTextResponse:
    return text_response(status.HTTP_405_METHOD_NOT_ALLOWED, "Method Not Allowed")


def payload_too_large() -> PlainTextResponse:
    return text_response(HTTP_413_PAYLOAD_TOO_LARGE, "Payload Too Large")


def internal_error() -> PlainTextResponse:
    return text_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


class ImageHandler:
    """HTTP handlers for image cache operations.

    Dispatches a request by method to get, put or delete, and maps domain
    errors to status codes:

    - InvalidKeyError -> 400
    - CacheMissError / OriginUnavailableError -> 404
    - UnsupportedMethodError -> 405
    - PayloadTooLargeError -> 413
    - StoreIOError -> 500

    Example:
        ```python
        handler = ImageHandler(cache_service=service, max_body_bytes=10 * 1024 * 1024)

        @app.api_route("/{code:path}", methods=["GET", "PUT", "DELETE"])
        async def image(request: Request) -> Response:
            return await handler.handle(request)
        ```
    """

    def __init__(self, cache_service: ImageCacheService, max_body_bytes: int) -> None:
        """Initialize the image handler.

        Args:
            cache_service: The cache service for business logic (required).
            max_body_bytes: Largest PUT body accepted before answering 413.
        """
        self._cache = cache_service
        self._max_body_bytes = max_body_bytes

    async def handle(self, request: Request) -> Response:
        """Route a request by method.

        Every failure is turned into a response here, so one request's error
        never affects another request.
        """
        method = request.method.upper()
        try:
            if method == "GET":
                return await self.get(CacheKey.from_path(request.url.path))
            if method == "PUT":
                return await self.put(CacheKey.from_path(request.url.path), request)
            if method == "DELETE":
                return await self.delete(CacheKey.from_path(request.url.path))
            raise UnsupportedMethodError(method)
        except InvalidKeyError as e:
            logger.warning(f"Rejected {method} {request.url.path}: {e}")
            return bad_request()
        except UnsupportedMethodError:
            logger.warning(f"Unsupported method: {method}")
            return method_not_allowed()
        except Exception:
            logger.exception(f"Unhandled error for {method} {request.url.path}")
            return internal_error()

    async def get(self, key: CacheKey) -> Response:
        """Handle GET /{code} requests."""
        try:
            data = await self._cache.get(key)
        except OriginUnavailableError as e:
            logger.info(f"Image not found for {key}: {e.reason}")
            return not_found()

        return Response(content=data, status_code=status.HTTP_200_OK, media_type=IMAGE_MEDIA_TYPE)

    async def put(self, key: CacheKey, request: Request) -> Response:
        """Handle PUT /{code} requests.

        The whole body is buffered before the write, bounded by
        ``max_body_bytes``.
        """
        try:
            body = await self._read_body(request)
        except PayloadTooLargeError as e:
            logger.warning(f"Rejected upload for {key}: {e}")
            return payload_too_large()

        try:
            await self._cache.put(key, body)
        except StoreIOError:
            logger.exception(f"Error writing entry {key}")
            return internal_error()

        return text_response(status.HTTP_201_CREATED, "Created")

    async def delete(self, key: CacheKey) -> Response:
        """Handle DELETE /{code} requests."""
        try:
            await self._cache.delete(key)
        except CacheMissError:
            logger.warning(f"Cannot delete, entry not found: {key}")
            return not_found()
        except StoreIOError:
            logger.exception(f"Error deleting entry {key}")
            return internal_error()

        return text_response(status.HTTP_200_OK, "Deleted")

    async def _read_body(self, request: Request) -> bytes:
        declared = request.headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > self._max_body_bytes:
            raise PayloadTooLargeError(self._max_body_bytes)

        body = bytearray()
        async for chunk in request.stream():
            body.extend(chunk)
            if len(body) > self._max_body_bytes:
                raise PayloadTooLargeError(self._max_body_bytes)
        return bytes(body)
