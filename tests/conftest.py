import random
from pathlib import Path

import pytest
import pytest_asyncio
from cachetools import LRUCache
from httpx import ASGITransport, AsyncClient

from pastebin.core.id_generator import IdGenerator
from pastebin.core.paste_validation import validate_namespace
from pastebin.main import app
from pastebin.routers.pastes import get_render_pipeline, get_repository_factory
from pastebin.services.paste_repository import PasteRepository
from pastebin.services.render import RenderPipeline
from pastebin.storage.disk_storage import DiskStorage
from pastebin.storage.ipfs_storage import IpfsStorage
from tests.fakes import FakeHighlighter, FakeIpfsClient

TEST_MAX_SIZE = 1024


@pytest.fixture
def paste_root(tmp_path: Path) -> Path:
    return tmp_path / "pastes"


@pytest.fixture
def id_generator() -> IdGenerator:
    return IdGenerator(4, random.Random(1234))


@pytest.fixture
def cache() -> LRUCache:
    return LRUCache(maxsize=64 * 1024, getsizeof=len)


@pytest.fixture
def disk_repositories(paste_root: Path, id_generator: IdGenerator, cache: LRUCache):
    def factory(namespace: str) -> PasteRepository:
        namespace = validate_namespace(namespace)
        storage = DiskStorage(paste_root / f"_{namespace}", cache=cache)
        return PasteRepository(storage, id_generator, min_size=16, max_size=TEST_MAX_SIZE)

    return factory


@pytest.fixture
def ipfs_client() -> FakeIpfsClient:
    return FakeIpfsClient()


@pytest.fixture
def ipfs_repositories(paste_root: Path, id_generator: IdGenerator, ipfs_client: FakeIpfsClient):
    def factory(namespace: str) -> PasteRepository:
        validate_namespace(namespace)
        storage = IpfsStorage(ipfs_client, paste_root, id_generator)
        return PasteRepository(storage, id_generator, min_size=16, max_size=TEST_MAX_SIZE)

    return factory


@pytest.fixture
def highlighter() -> FakeHighlighter:
    return FakeHighlighter()


def _override(repositories, highlighter: FakeHighlighter) -> None:
    app.dependency_overrides[get_repository_factory] = lambda: repositories
    app.dependency_overrides[get_render_pipeline] = lambda: RenderPipeline(highlighter, fallback=True)


@pytest_asyncio.fixture
async def client(disk_repositories, highlighter: FakeHighlighter):
    _override(disk_repositories, highlighter)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def ipfs_http_client(ipfs_repositories, highlighter: FakeHighlighter):
    _override(ipfs_repositories, highlighter)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()
