"""IPFS storage through the node's command-line client."""

import asyncio
import logging
from pathlib import Path

import aiofiles

from pastebin.core.errors import PasteNotFound, StorageError
from pastebin.core.id_generator import IdGenerator
from pastebin.core.paste_validation import sanitize_filename
from pastebin.storage.base import ContentAddressedStorage

logger = logging.getLogger(__name__)

MAX_STAGING_ATTEMPTS = 16


def parse_add_output(output: bytes) -> str:
    """
    Extract the hash from `ipfs add` output ("added <hash> <name>" per line).
    With -r the last line is the wrapping directory, which is what we want.
    """
    lines = [line for line in output.decode("utf-8", errors="replace").splitlines() if line.strip()]
    if not lines:
        raise StorageError("ipfs add returned no output")
    words = lines[-1].split()
    if len(words) < 2:
        raise StorageError(f"unexpected ipfs add output: {lines[-1][:100]}")
    return words[1]


class IpfsClient:
    """Thin async wrapper over `ipfs add` and `ipfs cat`."""

    def __init__(self, binary: str = "ipfs") -> None:
        self.binary = binary

    async def _run(self, *args: str) -> tuple[int, bytes, bytes]:
        try:
            process = await asyncio.create_subprocess_exec(
                self.binary,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise StorageError(f"cannot run {self.binary}: {e}") from e
        stdout, stderr = await process.communicate()
        return process.returncode, stdout, stderr

    async def add(self, path: Path, recursive: bool = False) -> str:
        args = ["add", "-r", "--", str(path)] if recursive else ["add", "--", str(path)]
        returncode, stdout, stderr = await self._run(*args)
        if returncode != 0:
            raise StorageError(f"ipfs add failed: {stderr.decode(errors='replace').strip()}")
        return parse_add_output(stdout)

    async def cat(self, key: str) -> bytes:
        returncode, stdout, _ = await self._run("cat", "--", key)
        # Missing objects and node failures look the same from here
        if returncode != 0:
            raise PasteNotFound()
        return stdout


class IpfsStorage(ContentAddressedStorage):
    """
    Pastes are staged under staging_root, added to IPFS, then unstaged.
    Named pastes are staged inside a directory so the filename survives
    in the key as "<hash>/<filename>".
    """

    def __init__(self, client: IpfsClient, staging_root: Path, id_generator: IdGenerator) -> None:
        self.client = client
        self.staging_root = Path(staging_root)
        self.id_generator = id_generator

    async def read(self, key: str) -> bytes:
        # Hashes never start with "-"; such keys are client options, not objects
        if not key or key.startswith("-"):
            raise PasteNotFound()
        return await self.client.cat(key)

    async def add(self, filename: str | None, data: bytes) -> str:
        name = sanitize_filename(filename) if filename else ""
        self.staging_root.mkdir(parents=True, exist_ok=True)
        staging = self._reserve_staging(directory=bool(name))
        staged_file = staging / name if name else staging
        try:
            async with aiofiles.open(staged_file, "wb") as f:
                await f.write(data)
            if name:
                digest = await self.client.add(staging, recursive=True)
                key = f"{digest}/{name}"
            else:
                key = await self.client.add(staged_file)
        finally:
            self._unstage(staging, staged_file)
        return key

    def _reserve_staging(self, directory: bool) -> Path:
        for _ in range(MAX_STAGING_ATTEMPTS):
            staging = self.staging_root / self.id_generator.new_id()
            try:
                if directory:
                    staging.mkdir()
                else:
                    staging.touch(exist_ok=False)
            except FileExistsError:
                continue
            return staging
        raise StorageError("could not reserve an IPFS staging path")

    def _unstage(self, staging: Path, staged_file: Path) -> None:
        try:
            staged_file.unlink(missing_ok=True)
            if staging != staged_file:
                staging.rmdir()
        except OSError as e:
            # The content is already in IPFS at this point
            logger.error("Failed to remove IPFS staging path %s: %s", staging, e)
