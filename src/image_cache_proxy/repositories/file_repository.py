"""Filesystem implementation of BlobStore.

Each entry is a single file ``{root}/{key}.jpg``. There is no index or
metadata file. Blocking file I/O runs in worker threads so the event loop
keeps serving other requests.
"""

import asyncio
import contextlib
import logging
import os
import tempfile
from pathlib import Path

from image_cache_proxy.entities import FILE_SUFFIX, CacheKey
from image_cache_proxy.errors import CacheMissError, StoreIOError

logger = logging.getLogger(__name__)


def current_umask() -> int:
    """Read the process umask without changing it."""
    mask = os.umask(0)
    os.umask(mask)
    return mask


class FileBlobStore:
    """Directory-backed implementation of the BlobStore protocol.

    Writes go to a hidden temporary file in the same directory and are
    moved into place with ``os.replace``, so a concurrent reader sees
    either the old payload or the new one, never a partial file.
    """

    def __init__(self, root: Path) -> None:
        """Initialize the store over an existing directory.

        Args:
            root: The cache directory. Use ``create`` to make sure it exists.
        """
        self._root = Path(root)
        # mkstemp creates 0600 files; entries get the usual 0666 & ~umask
        self._file_mode = 0o666 & ~current_umask()

    @classmethod
    def create(cls, root: Path) -> "FileBlobStore":
        """Factory method that creates the cache directory if needed.

        Args:
            root: The cache directory

        Returns:
            Configured FileBlobStore

        Raises:
            StoreIOError: If the directory cannot be created
        """
        root = Path(root)
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreIOError(f"Cannot create cache directory {root}: {e}") from e
        logger.info(f"Cache directory ready: {root}")
        return cls(root)

    @property
    def root(self) -> Path:
        """The cache directory."""
        return self._root

    def path_for(self, key: CacheKey) -> Path:
        """Location of the file holding a key's entry."""
        return self._root / key.filename

    async def exists(self, key: CacheKey) -> bool:
        try:
            return await asyncio.to_thread(self.path_for(key).is_file)
        except OSError:
            return False

    async def read(self, key: CacheKey) -> bytes:
        try:
            return await asyncio.to_thread(self.path_for(key).read_bytes)
        except OSError as e:
            raise CacheMissError(str(key)) from e

    async def write(self, key: CacheKey, data: bytes) -> None:
        try:
            await asyncio.to_thread(self._write_atomic, self.path_for(key), data)
        except OSError as e:
            raise StoreIOError(f"Failed to write entry {key}: {e.strerror or e}") from e

    async def delete(self, key: CacheKey) -> None:
        try:
            await asyncio.to_thread(self.path_for(key).unlink)
        except FileNotFoundError as e:
            raise CacheMissError(str(key)) from e
        except OSError as e:
            raise StoreIOError(f"Failed to delete entry {key}: {e.strerror or e}") from e

    async def keys(self) -> list[str]:
        """List the keys of all stored entries, sorted."""
        return await asyncio.to_thread(self._list_keys)

    async def count(self) -> int:
        return len(await self.keys())

    def _list_keys(self) -> list[str]:
        try:
            names = [
                entry.name[: -len(FILE_SUFFIX)]
                for entry in self._root.iterdir()
                if entry.name.endswith(FILE_SUFFIX) and not entry.name.startswith(".") and entry.is_file()
            ]
        except OSError as e:
            raise StoreIOError(f"Cannot list cache directory {self._root}: {e}") from e
        return sorted(names)

    def _write_atomic(self, path: Path, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self._root, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                os.fchmod(f.fileno(), self._file_mode)
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
