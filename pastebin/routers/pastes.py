"""Paste API: write, read and render pastes."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse
from starlette.datastructures import FormData, UploadFile
from starlette.types import Message

from pastebin.config import DEFAULT_NAMESPACE, PASTE_FILENAME_FIELD, PASTE_FORM_FIELD, TEMP_NAMESPACE
from pastebin.core.errors import PasteTooLarge
from pastebin.schemas.paste import PasteCreated
from pastebin.services.paste_repository import PasteRepository, repository_for
from pastebin.services.render import RenderPipeline, render_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pastes"])

# Room for multipart boundaries and part headers on top of the paste itself
FORM_OVERHEAD = 64 * 1024

RepositoryFactory = Callable[[str], PasteRepository]


def get_repository_factory() -> RepositoryFactory:
    return repository_for


def get_render_pipeline() -> RenderPipeline:
    return render_pipeline


Repositories = Annotated[RepositoryFactory, Depends(get_repository_factory)]
Pipeline = Annotated[RenderPipeline, Depends(get_render_pipeline)]


def _display(namespace: str, key: str) -> str:
    return f"{namespace}/{key}" if namespace else key


def _paste_url(request: Request, namespace: str, key: str, content_addressed: bool) -> str:
    path = key if content_addressed else _display(namespace, key)
    return f"{request.base_url}{path}"


async def read_body(request: Request, max_size: int, slack: int = 0) -> bytes:
    """Read a raw request body, giving up as soon as it exceeds max_size + slack."""
    limit = max_size + slack
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise PasteTooLarge(max_size)
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PasteTooLarge(max_size)
    return bytes(body)


async def read_form(request: Request, max_size: int) -> FormData:
    """
    Parse a form whose body is bounded by max_size plus room for multipart
    framing. Parts are never cut short by the parser; the paste itself is
    size-checked by the repository afterwards.
    """
    body = await read_body(request, max_size, slack=FORM_OVERHEAD)

    async def replay() -> Message:
        return {"type": "http.request", "body": body, "more_body": False}

    return await Request(request.scope, replay).form(max_part_size=len(body) + 1)


async def _read(
    request: Request,
    namespace: str,
    key: str,
    repository: PasteRepository,
    pipeline: RenderPipeline,
) -> Response:
    data = await repository.read_paste(key)
    logger.info("READ %s", _display(namespace, key))
    rendered = await pipeline.render(data, namespace, request.url.query, key)
    # Single-use pastes are only consumed by a read that is actually served
    if namespace == TEMP_NAMESPACE:
        await repository.delete_paste(key)
        logger.info("DELETE %s (single use)", _display(namespace, key))
    return Response(content=rendered.body, media_type=rendered.media_type)


async def _write(
    request: Request,
    namespace: str,
    filename: str | None,
    data: bytes,
    repository: PasteRepository,
) -> Response:
    key = await repository.write_paste(filename, data)
    logger.info("WRITE %s (%s)", _display(namespace, key), filename or "-")
    url = _paste_url(request, namespace, key, repository.content_addressed)
    if "application/json" in request.headers.get("accept", ""):
        created = PasteCreated(key=key, namespace=namespace, url=url, size=len(data))
        return Response(content=created.model_dump_json(), media_type="application/json")
    return PlainTextResponse(url + "\n")


@router.get("/{key}")
async def read_default(key: str, request: Request, repositories: Repositories, pipeline: Pipeline) -> Response:
    """Read a paste from the default namespace (or an unnamed IPFS paste)."""
    return await _read(request, DEFAULT_NAMESPACE, key, repositories(DEFAULT_NAMESPACE), pipeline)


@router.get("/{first}/{second}")
async def read_nested(
    first: str,
    second: str,
    request: Request,
    repositories: Repositories,
    pipeline: Pipeline,
) -> Response:
    """Disk: /<namespace>/<key>. IPFS: /<hash>/<filename>."""
    default = repositories(DEFAULT_NAMESPACE)
    if default.content_addressed:
        return await _read(request, DEFAULT_NAMESPACE, f"{first}/{second}", default, pipeline)
    return await _read(request, first, second, repositories(first), pipeline)


async def _post(request: Request, namespace: str, repositories: RepositoryFactory) -> Response:
    repository = repositories(namespace)
    form = await read_form(request, repository.max_size)
    value = form.get(PASTE_FORM_FIELD)
    filename = form.get(PASTE_FILENAME_FIELD) or None
    if isinstance(value, UploadFile):
        filename = filename or value.filename
        data = await value.read()
    else:
        data = (value or "").encode("utf-8")
    if isinstance(filename, UploadFile):
        filename = filename.filename
    return await _write(request, namespace, filename, data, repository)


@router.post("/")
async def post_default(request: Request, repositories: Repositories) -> Response:
    """Form upload (field `p`) to the default namespace."""
    return await _post(request, DEFAULT_NAMESPACE, repositories)


@router.post("/{namespace}")
async def post_namespace(namespace: str, request: Request, repositories: Repositories) -> Response:
    return await _post(request, namespace, repositories)


async def _put(request: Request, namespace: str, filename: str | None, repositories: RepositoryFactory) -> Response:
    repository = repositories(namespace)
    if filename == "-":
        filename = None
    data = await read_body(request, repository.max_size)
    return await _write(request, namespace, filename, data, repository)


@router.put("/")
async def put_default(request: Request, repositories: Repositories) -> Response:
    """Raw body upload, e.g. `cmd | curl host -T -`."""
    return await _put(request, DEFAULT_NAMESPACE, None, repositories)


@router.put("/{filename}")
async def put_file(filename: str, request: Request, repositories: Repositories) -> Response:
    return await _put(request, DEFAULT_NAMESPACE, filename, repositories)


@router.put("/{namespace}/{filename}")
async def put_namespace_file(
    namespace: str,
    filename: str,
    request: Request,
    repositories: Repositories,
) -> Response:
    return await _put(request, namespace, filename, repositories)
