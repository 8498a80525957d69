# Storage backends

from cachetools import LRUCache

from pastebin.config import IPFS_BINARY, PASTE_BASE_PATH, PASTE_CACHE_SIZE, PASTE_ID_LENGTH, STORAGE_BACKEND
from pastebin.core.id_generator import IdGenerator
from pastebin.storage.base import ContentAddressedStorage, KeyValueStorage, StorageBackend
from pastebin.storage.disk_storage import DiskStorage
from pastebin.storage.ipfs_storage import IpfsClient, IpfsStorage

# Process-wide state, created once at startup
id_generator = IdGenerator(PASTE_ID_LENGTH)
paste_cache: LRUCache = LRUCache(maxsize=PASTE_CACHE_SIZE, getsizeof=len)
ipfs_client = IpfsClient(IPFS_BINARY)


def namespace_root(namespace: str):
    return PASTE_BASE_PATH / f"_{namespace}"


def get_storage(namespace: str) -> StorageBackend:
    """Build the configured backend for one request, scoped to namespace."""
    if STORAGE_BACKEND == "ipfs":
        return IpfsStorage(ipfs_client, PASTE_BASE_PATH, id_generator)
    return DiskStorage(namespace_root(namespace), cache=paste_cache)


__all__ = [
    "ContentAddressedStorage",
    "DiskStorage",
    "IpfsClient",
    "IpfsStorage",
    "KeyValueStorage",
    "StorageBackend",
    "get_storage",
    "id_generator",
]
