"""Handler layer for HTTP endpoints.

Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .image_handler import ImageHandler, method_not_allowed, not_found, text_response

__all__ = [
    "ImageHandler",
    "method_not_allowed",
    "not_found",
    "text_response",
]
