"""Local filesystem storage with an in-memory read cache."""

from pathlib import Path

import aiofiles
from cachetools import LRUCache

from pastebin.core.errors import PasteNotFound
from pastebin.storage.base import KeyValueStorage


class DiskStorage(KeyValueStorage):
    """
    One file per paste under root, flat. root is created on the first write.
    The cache is keyed by absolute path so one instance can be shared by
    every namespace in the process.
    """

    def __init__(self, root: Path, cache: LRUCache | None = None) -> None:
        self.root = Path(root).resolve()
        self.cache = cache

    def _path(self, key: str) -> Path:
        """Prevent path traversal; keys are single path segments."""
        if not key or "/" in key or "\\" in key or "\x00" in key or key in (".", ".."):
            raise PasteNotFound()
        path = (self.root / key).resolve()
        if path.parent != self.root:
            raise PasteNotFound()
        return path

    async def has(self, key: str) -> bool:
        try:
            path = self._path(key)
        except PasteNotFound:
            return False
        if self.cache is not None and str(path) in self.cache:
            return True
        return path.is_file()

    async def read(self, key: str) -> bytes:
        path = self._path(key)
        if self.cache is not None:
            cached = self.cache.get(str(path))
            if cached is not None:
                return cached
        try:
            async with aiofiles.open(path, "rb") as f:
                data = await f.read()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            raise PasteNotFound() from None
        self._remember(path, data)
        return data

    async def write(self, key: str, data: bytes) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)
        self._remember(path, data)

    async def erase(self, key: str) -> None:
        path = self._path(key)
        if self.cache is not None:
            self.cache.pop(str(path), None)
        path.unlink(missing_ok=True)

    def _remember(self, path: Path, data: bytes) -> None:
        # LRUCache refuses single items bigger than its whole capacity
        if self.cache is not None and len(data) <= self.cache.maxsize:
            self.cache[str(path)] = data
