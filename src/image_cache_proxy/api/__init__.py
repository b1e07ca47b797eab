"""HTTP API: FastAPI application factory and dependency wiring."""

from .app import create_app

__all__ = ["create_app"]
