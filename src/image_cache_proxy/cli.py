"""Command-line entry point.

Usage:
    image-cache-proxy -h 127.0.0.1 -p 8000 -c ./cache
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

import uvicorn

from image_cache_proxy import __version__
from image_cache_proxy.api import create_app
from image_cache_proxy.config import Settings, get_settings
from image_cache_proxy.errors import StoreIOError
from image_cache_proxy.logging_config import setup_logging
from image_cache_proxy.repositories import FileBlobStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    # -h is the host option, so help moves to --help only
    parser = argparse.ArgumentParser(
        prog="image-cache-proxy",
        description="Local caching proxy for origin images",
        add_help=False,
    )
    parser.add_argument("-h", "--host", required=True, help="Server host address")
    parser.add_argument("-p", "--port", required=True, type=int, help="Server port number")
    parser.add_argument("-c", "--cache", required=True, type=Path, help="Cache directory path")
    parser.add_argument("--help", action="help", help="Show this help message and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Overlay the required CLI options on the environment settings.

    Raises:
        ValueError: If the resulting settings are invalid
    """
    return dataclasses.replace(
        get_settings(),
        host=args.host,
        port=args.port,
        cache_dir=args.cache,
    )


def main(argv: list[str] | None = None) -> int:
    """Parse options, prepare the cache directory and serve until stopped.

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(settings.log_level)

    try:
        FileBlobStore.create(settings.cache_dir)
    except StoreIOError as e:
        logger.error(f"Failed to create cache directory: {e}")
        return 1

    logger.info(f"Server running at http://{settings.host}:{settings.port}/")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
