"""Abstract storage backends."""

from abc import ABC, abstractmethod


class StorageBackend(ABC):
    """Interface shared by every paste store (disk or IPFS)."""

    # True when the backend derives keys from content instead of accepting them
    content_addressed = False

    @abstractmethod
    async def read(self, key: str) -> bytes:
        """Return the bytes stored at key. Raises PasteNotFound if absent."""
        ...


class KeyValueStorage(StorageBackend):
    """A store that accepts caller-chosen keys."""

    @abstractmethod
    async def has(self, key: str) -> bool:
        ...

    @abstractmethod
    async def write(self, key: str, data: bytes) -> None:
        """Store data at key, overwriting anything already there."""
        ...

    @abstractmethod
    async def erase(self, key: str) -> None:
        ...


class ContentAddressedStorage(StorageBackend):
    """A store that hands back the key for what was added."""

    content_addressed = True

    @abstractmethod
    async def add(self, filename: str | None, data: bytes) -> str:
        """
        Store data and return its key.
        With a filename the key is "<hash>/<filename>", otherwise "<hash>".
        """
        ...
