"""Content-type aware formatting and highlighting of message bodies."""

import io
import json
from enum import Enum
from typing import Optional

from rich.console import Console
from rich.syntax import Syntax

JSON_INDENT = 4


class ContentKind(str, Enum):
    JSON = "json"
    TEXT = "text"
    BINARY = "binary"


_TEXT_LEXERS = {
    "text/html": "html",
    "application/xhtml+xml": "html",
    "text/xml": "xml",
    "application/xml": "xml",
    "text/css": "css",
    "text/javascript": "javascript",
    "application/javascript": "javascript",
    "application/x-javascript": "javascript",
    "text/yaml": "yaml",
    "application/yaml": "yaml",
    "application/x-yaml": "yaml",
    "text/markdown": "markdown",
    "text/csv": "text",
    "text/plain": "text",
}


def mime_type(content_type: Optional[str]) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def classify(content_type: Optional[str]) -> ContentKind:
    """Decide how a body with the given Content-Type may be rendered."""
    mime = mime_type(content_type)
    if mime in ("application/json", "text/json") or mime.endswith("+json"):
        return ContentKind.JSON
    if mime in _TEXT_LEXERS or mime.endswith("+xml") or mime.startswith("text/"):
        return ContentKind.TEXT
    return ContentKind.BINARY


def lexer_for(content_type: Optional[str]) -> str:
    mime = mime_type(content_type)
    kind = classify(mime)
    if kind == ContentKind.JSON:
        return "json"
    if mime.endswith("+xml"):
        return "xml"
    return _TEXT_LEXERS.get(mime, "text")


def format_json(text: str) -> Optional[str]:
    """Re-indent a JSON document, keeping keys in the order received.

    Returns ``None`` when ``text`` is not valid JSON so the caller can fall
    back to the original bytes.
    """
    try:
        data = json.loads(text)
    except ValueError:
        return None
    return json.dumps(data, indent=JSON_INDENT, ensure_ascii=False)


class Highlighter:
    """Renders text to ANSI escape sequences for a lexer and a theme."""

    def __init__(self, theme: str):
        self.theme = theme
        self._buffer = io.StringIO()
        self._console = Console(
            file=self._buffer,
            force_terminal=True,
            color_system="256",
            soft_wrap=True,
            highlight=False,
            markup=False,
            emoji=False,
        )

    def highlight(self, text: str, lexer: str) -> str:
        if not text or lexer == "text":
            return text
        syntax = Syntax(text, lexer, theme=self.theme, background_color="default")
        highlighted = syntax.highlight(text)
        # Pygments always terminates its output with a newline.
        if not text.endswith("\n") and highlighted.plain.endswith("\n"):
            highlighted.right_crop(1)
        self._console.print(highlighted, end="")
        rendered = self._buffer.getvalue()
        self._buffer.seek(0)
        self._buffer.truncate()
        return rendered
