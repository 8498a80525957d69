import asyncio
import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from pastebin.config import (
    BIND_ADDRESS,
    HTTP_PORT,
    HTTPS_PORT,
    LOG_LEVEL,
    SSL_CERT_PATH,
    SSL_KEY_PATH,
    STORAGE_BACKEND,
    USE_SSL,
    WELL_KNOWN_PATH,
)
from pastebin.core.errors import PasteError
from pastebin.routers import pastes, usage

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

STATIC_PATH = Path(__file__).parent / "static"

app = FastAPI(
    title="Pastebin",
    description="Command line pastebin with disk or IPFS storage",
    version="0.1.0",
    docs_url=None,
    redoc_url=None,
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        # Pastes are served as stored, never content-sniffed
        response.headers["X-Content-Type-Options"] = "nosniff"
        if USE_SSL:
            response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
        return response


app.add_middleware(SecurityHeadersMiddleware)


@app.exception_handler(PasteError)
async def paste_error_handler(request: Request, exc: PasteError):
    if exc.status_code >= 500:
        logger.error("[ERROR] %s %s (%s)", request.method, request.url.path, exc)
    else:
        logger.warning("[ERROR] %s %s (%s)", request.method, request.url.path, exc)
    return PlainTextResponse(f"{exc}\n", status_code=exc.status_code)


# Mounted before the routers so these paths never reach /{namespace}/{key}
app.mount("/static", StaticFiles(directory=STATIC_PATH), name="static")
app.mount("/.well-known", StaticFiles(directory=WELL_KNOWN_PATH, check_dir=False), name="well-known")

# Include routers
app.include_router(usage.router)
app.include_router(pastes.router)

logger.info("Pastebin ready (storage backend: %s)", STORAGE_BACKEND)


def server_configs() -> list[uvicorn.Config]:
    """Plain HTTP always; HTTPS alongside it when a certificate is configured."""
    configs = [uvicorn.Config(app, host=BIND_ADDRESS, port=HTTP_PORT)]
    if USE_SSL:
        configs.append(
            uvicorn.Config(
                app,
                host=BIND_ADDRESS,
                port=HTTPS_PORT,
                ssl_certfile=SSL_CERT_PATH,
                ssl_keyfile=SSL_KEY_PATH,
            )
        )
    return configs


async def serve() -> None:
    WELL_KNOWN_PATH.mkdir(parents=True, exist_ok=True)
    await asyncio.gather(*(uvicorn.Server(config).serve() for config in server_configs()))


def run() -> None:
    asyncio.run(serve())


if __name__ == "__main__":
    run()
