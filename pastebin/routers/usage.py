"""Usage page: plain text for curl, an upload form for browsers."""

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.templating import Jinja2Templates

from pastebin.config import (
    DEFAULT_NAMESPACE,
    MARKDOWN_NAMESPACE,
    MARKDOWN_QUERY,
    MAX_PASTE_SIZE,
    MIN_PASTE_SIZE,
    PASTE_FILENAME_FIELD,
    PASTE_FORM_FIELD,
    STORAGE_BACKEND,
    TEMP_NAMESPACE,
)
from pastebin.core.paste_validation import validate_namespace

TEMPLATES_PATH = Path(__file__).parent.parent / "templates"

templates = Jinja2Templates(directory=TEMPLATES_PATH)

router = APIRouter(tags=["usage"])


def _render_usage(request: Request, namespace: str):
    namespace = validate_namespace(namespace)
    context = {
        "base_url": request.url.netloc,
        "scheme": request.url.scheme,
        "sub_dir": f"/{namespace}" if namespace else "",
        "form_field": PASTE_FORM_FIELD,
        "filename_field": PASTE_FILENAME_FIELD,
        "min_size": MIN_PASTE_SIZE,
        "max_size": MAX_PASTE_SIZE,
        "markdown_namespace": MARKDOWN_NAMESPACE,
        "markdown_query": MARKDOWN_QUERY,
        "temp_namespace": TEMP_NAMESPACE,
        "ipfs": STORAGE_BACKEND == "ipfs",
    }
    if request.headers.get("user-agent", "").startswith("curl"):
        return templates.TemplateResponse(request, "usage.txt", context, media_type="text/plain")
    return templates.TemplateResponse(request, "usage.html", context)


@router.get("/")
async def usage(request: Request):
    return _render_usage(request, DEFAULT_NAMESPACE)


@router.get("/{namespace}/")
async def namespace_usage(namespace: str, request: Request):
    return _render_usage(request, namespace)
