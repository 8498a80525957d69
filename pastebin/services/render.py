"""Turn stored paste bytes into a response body: Markdown, highlighted, or raw."""

import asyncio
import logging
from dataclasses import dataclass

from markdown_it import MarkdownIt

from pastebin.config import (
    HIGHLIGHT_COMMAND,
    HIGHLIGHT_FALLBACK,
    HIGHLIGHT_STYLE,
    MARKDOWN_NAMESPACE,
    MARKDOWN_QUERY,
)
from pastebin.core.errors import HighlightError

logger = logging.getLogger(__name__)

PLAIN_TEXT = "text/plain; charset=utf-8"
HTML = "text/html; charset=utf-8"

# Raw HTML inside pastes is escaped, never passed through
_MD = MarkdownIt("commonmark", {"html": False}).enable(["table", "strikethrough"])


def render_markdown(data: bytes) -> bytes:
    return _MD.render(data.decode("utf-8", errors="replace")).encode()


class PygmentsHighlighter:
    """Runs a pygmentize-compatible command: paste on stdin, full HTML page on stdout."""

    def __init__(self, command: list[str] | None = None, style: str = HIGHLIGHT_STYLE) -> None:
        self.command = command or HIGHLIGHT_COMMAND
        self.style = style

    async def highlight(self, code: bytes, lexer: str, title: str) -> bytes:
        args = [
            *self.command,
            "-l", lexer,
            "-f", "html",
            "-O", f"encoding=utf-8,full,style={self.style},linenos=table",
            "-P", f"title={title}",
        ]
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise HighlightError(f"cannot run highlighter: {e}") from e
        stdout, stderr = await process.communicate(code)
        if process.returncode != 0:
            logger.warning(
                "Highlighter exited with %d for lexer %r: %s",
                process.returncode, lexer, stderr.decode(errors="replace").strip(),
            )
            raise HighlightError()
        return stdout


@dataclass
class RenderedPaste:
    body: bytes
    media_type: str


class RenderPipeline:
    """
    Selection, first match wins:
    1. Markdown namespace, or the reserved Markdown query -> Markdown as HTML
    2. any other non-empty query -> syntax highlighting with the query as lexer
    3. raw content as plain text
    A failed highlight serves the raw content unless fallback is disabled,
    in which case HighlightError propagates.
    """

    def __init__(
        self,
        highlighter: PygmentsHighlighter,
        markdown_namespace: str = MARKDOWN_NAMESPACE,
        markdown_query: str = MARKDOWN_QUERY,
        fallback: bool = HIGHLIGHT_FALLBACK,
    ) -> None:
        self.highlighter = highlighter
        self.markdown_namespace = markdown_namespace
        self.markdown_query = markdown_query
        self.fallback = fallback

    async def render(self, data: bytes, namespace: str, query: str, key: str) -> RenderedPaste:
        if namespace == self.markdown_namespace or (query and query == self.markdown_query):
            return RenderedPaste(render_markdown(data), HTML)

        if query:
            try:
                body = await self.highlighter.highlight(data, query, key)
            except HighlightError as e:
                if not self.fallback:
                    raise
                logger.warning("Highlighting %s with lexer %r failed: %s", key, query, e)
            else:
                return RenderedPaste(body, HTML)

        return RenderedPaste(data, PLAIN_TEXT)


render_pipeline = RenderPipeline(PygmentsHighlighter())
