"""Write, read and delete pastes on top of a storage backend."""

import logging

from pastebin.config import MAX_PASTE_SIZE, MIN_PASTE_SIZE
from pastebin.core.errors import StorageError
from pastebin.core.id_generator import IdGenerator
from pastebin.core.paste_validation import extension_for, validate_namespace, validate_size
from pastebin.storage import get_storage, id_generator
from pastebin.storage.base import ContentAddressedStorage, KeyValueStorage, StorageBackend

logger = logging.getLogger(__name__)

# 62**4 keys per namespace; running out of attempts means the namespace is nearly full
MAX_KEY_ATTEMPTS = 1000


class PasteRepository:
    """Paste operations for a single namespace."""

    def __init__(
        self,
        storage: StorageBackend,
        id_generator: IdGenerator,
        min_size: int = MIN_PASTE_SIZE,
        max_size: int = MAX_PASTE_SIZE,
    ) -> None:
        self.storage = storage
        self.id_generator = id_generator
        self.min_size = min_size
        self.max_size = max_size

    @property
    def content_addressed(self) -> bool:
        return self.storage.content_addressed

    async def write_paste(self, filename: str | None, data: bytes) -> str:
        """
        Store data and return its key. Size limits are checked before any I/O.
        Disk keys are "<id><.ext>", retried until the id is free. The check and
        the write are separate steps, so two concurrent writers can still land
        on the same key.
        """
        validate_size(len(data), self.min_size, self.max_size)

        if isinstance(self.storage, ContentAddressedStorage):
            return await self.storage.add(filename, data)

        key = await self._free_key(extension_for(filename))
        await self.storage.write(key, data)
        return key

    async def _free_key(self, extension: str) -> str:
        for _ in range(MAX_KEY_ATTEMPTS):
            key = self.id_generator.new_id() + extension
            if not await self.storage.has(key):
                return key
            logger.debug("Key collision on %s, retrying", key)
        raise StorageError(f"no free key after {MAX_KEY_ATTEMPTS} attempts")

    async def read_paste(self, key: str) -> bytes:
        return await self.storage.read(key)

    async def delete_paste(self, key: str) -> None:
        """Erase a paste; raises PasteNotFound when it is already gone."""
        if not isinstance(self.storage, KeyValueStorage):
            raise StorageError("this backend cannot delete pastes")
        await self.storage.read(key)
        await self.storage.erase(key)


def repository_for(namespace: str) -> PasteRepository:
    """Repository over the configured backend, built per request."""
    namespace = validate_namespace(namespace)
    return PasteRepository(get_storage(namespace), id_generator)
