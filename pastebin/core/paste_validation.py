"""Size, filename and namespace validation for pastes."""

import re

from pastebin.config import DEFAULT_NAMESPACE, MAX_PASTE_SIZE, MIN_PASTE_SIZE
from pastebin.core.errors import InvalidNamespace, PasteTooLarge, PasteTooSmall

# Every ".ext" run in a filename; the last one wins
EXTENSION_RE = re.compile(r"\.[A-Za-z0-9_-]+")
MAX_EXTENSION_LENGTH = 16

NAMESPACE_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")
RESERVED_NAMESPACES = frozenset({".", "..", "static", ".well-known"})


def validate_size(
    size: int,
    min_size: int = MIN_PASTE_SIZE,
    max_size: int = MAX_PASTE_SIZE,
) -> None:
    """Raise PasteTooLarge / PasteTooSmall unless min_size <= size <= max_size."""
    if size > max_size:
        raise PasteTooLarge(max_size)
    if size < min_size:
        raise PasteTooSmall(min_size)


def extension_for(filename: str | None) -> str:
    """
    Return the last ".ext" suffix of an uploaded filename, or "".
    "report.final.csv" -> ".csv"; "README" -> "".
    """
    if not filename:
        return ""
    matches = EXTENSION_RE.findall(filename)
    if not matches:
        return ""
    return matches[-1][:MAX_EXTENSION_LENGTH]


def sanitize_filename(filename: str) -> str:
    """Keep only characters safe for a single path segment."""
    safe_name = "".join(c for c in filename if c.isalnum() or c in "._-")[:64]
    return safe_name.strip(".")


def validate_namespace(namespace: str) -> str:
    """Return the namespace if it is usable as a storage directory name."""
    if namespace == DEFAULT_NAMESPACE:
        return namespace
    if not NAMESPACE_RE.match(namespace) or namespace in RESERVED_NAMESPACES:
        raise InvalidNamespace(f"invalid namespace: {namespace!r}")
    return namespace
