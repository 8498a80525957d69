"""Application configuration."""

import os
import shlex
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Storage: "disk" or "ipfs"
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "disk")

# Disk pastes live under <base>/_<namespace>/<key>; IPFS staging uses it too
PASTE_BASE_PATH = Path(os.getenv("PASTE_BASE_PATH", "pastes")).resolve()
PASTE_CACHE_SIZE = int(os.getenv("PASTE_CACHE_SIZE", 128 * 1024 * 1024))  # 128 MB

# Paste size limits (bytes)
MIN_PASTE_SIZE = int(os.getenv("MIN_PASTE_SIZE", "16"))
MAX_PASTE_SIZE = int(os.getenv("MAX_PASTE_SIZE", 1024 * 1024 * 1024))  # 1 GB

# Short URLs
PASTE_ID_LENGTH = int(os.getenv("PASTE_ID_LENGTH", "4"))
PASTE_FORM_FIELD = os.getenv("PASTE_FORM_FIELD", "p")
PASTE_FILENAME_FIELD = os.getenv("PASTE_FILENAME_FIELD", "file")

# Namespaces with special read behaviour
DEFAULT_NAMESPACE = ""
MARKDOWN_NAMESPACE = os.getenv("MARKDOWN_NAMESPACE", "md")
MARKDOWN_QUERY = os.getenv("MARKDOWN_QUERY", "md")
TEMP_NAMESPACE = os.getenv("TEMP_NAMESPACE", "temp")

# External tools
IPFS_BINARY = os.getenv("IPFS_BINARY", "ipfs")
HIGHLIGHT_COMMAND = shlex.split(os.getenv("HIGHLIGHT_COMMAND", f"{sys.executable} -m pygments"))
HIGHLIGHT_STYLE = os.getenv("HIGHLIGHT_STYLE", "native")
# Serve the raw paste when the highlighter fails instead of an error body
HIGHLIGHT_FALLBACK = os.getenv("HIGHLIGHT_FALLBACK", "true").lower() in ("true", "1", "yes")

# Server
USE_SSL = os.getenv("USE_SSL", "false").lower() in ("true", "1", "yes")
SSL_CERT_PATH = os.getenv("SSL_CERT_PATH", "cert/fullchain.cer")
SSL_KEY_PATH = os.getenv("SSL_KEY_PATH", "cert/server.key")
BIND_ADDRESS = os.getenv("BIND_ADDRESS", "0.0.0.0")
HTTP_PORT = int(os.getenv("HTTP_PORT", "8080"))
HTTPS_PORT = int(os.getenv("HTTPS_PORT", "8443"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Served as-is under /.well-known/, e.g. for ACME HTTP challenges
WELL_KNOWN_PATH = Path(os.getenv("WELL_KNOWN_PATH", ".well-known")).resolve()
