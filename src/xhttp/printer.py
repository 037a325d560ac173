"""Rendering of request and response headers and bodies."""

import codecs
import logging
from itertools import chain
from typing import Iterable, Iterator, Optional

import httpx

from ._utils.constants import (
    CHUNK_SIZE,
    HEADER_CONTENT_LENGTH,
    HEADER_CONTENT_TYPE,
    MAX_BUFFERED_BODY,
)
from .buffer import Buffer
from .formatting import ContentKind, Highlighter, classify, format_json, lexer_for
from .models.print_options import Pretty

logger = logging.getLogger(__name__)

BINARY_SUPPRESSED_NOTICE = (
    b"+-----------------------------------------+\n"
    b"| NOTE: binary data not shown in terminal |\n"
    b"+-----------------------------------------+"
)


class Printer:
    """Writes the selected parts of an exchange to a ``Buffer``.

    Headers are always buffered in full. Bodies are passed through chunk by
    chunk unless they are short enough to be re-indented or highlighted as
    a whole.
    """

    def __init__(
        self,
        pretty: Pretty,
        theme: str,
        stream: bool,
        buffer: Buffer,
    ):
        self.pretty = pretty
        self.stream = stream
        self.buffer = buffer
        self._highlighter = Highlighter(theme)

    def print_request_headers(self, request: httpx.Request) -> None:
        target = request.url.raw_path.decode("ascii")
        lines = [f"{request.method} {target} HTTP/1.1"]
        lines.extend(_header_lines(request.headers))
        self._print_headers(lines)

    def print_response_headers(self, response: httpx.Response) -> None:
        status_line = f"{response.http_version} {response.status_code} {response.reason_phrase}"
        lines = [status_line.rstrip()]
        lines.extend(_header_lines(response.headers))
        self._print_headers(lines)

    def print_request_body(self, request: httpx.Request) -> None:
        content = request.read()
        if not content:
            return
        content_type = request.headers.get(HEADER_CONTENT_TYPE)
        self._print_body(iter([content]), content_type, "utf-8", len(content))
        self.buffer.write(b"\n\n")
        self.buffer.flush()

    def print_response_body(self, response: httpx.Response) -> None:
        content_type = response.headers.get(HEADER_CONTENT_TYPE)
        length = response.headers.get(HEADER_CONTENT_LENGTH)
        wrote, reformatted = self._print_body(
            response.iter_bytes(),
            content_type,
            response.encoding,
            int(length) if length and length.isdigit() else None,
        )
        if wrote and (self.buffer.is_terminal or reformatted):
            self.buffer.write(b"\n")
        self.buffer.flush()

    def _print_headers(self, lines: list[str]) -> None:
        text = "\n".join(lines)
        if self.pretty.color:
            text = self._highlighter.highlight(text, "http")
        self.buffer.write(text.encode("utf-8") + b"\n\n")
        self.buffer.flush()

    def _print_body(
        self,
        chunks: Iterator[bytes],
        content_type: Optional[str],
        encoding: Optional[str],
        length: Optional[int],
    ) -> tuple[bool, bool]:
        """Render a body.

        Only a body of known length up to ``MAX_BUFFERED_BODY`` is read whole,
        and only when it has to be reformatted or highlighted. Anything else
        is written as it arrives.

        Returns:
            Whether anything was written, and whether the body was
            re-indented.
        """
        first = next(chunks, b"")
        if not first:
            return False, False
        if self.buffer.is_terminal and b"\0" in first:
            self.buffer.write(BINARY_SUPPRESSED_NOTICE)
            return True, False

        chunks = chain([first], chunks)
        kind = classify(content_type)
        reformat = self.pretty.format and kind == ContentKind.JSON
        if kind == ContentKind.BINARY or not (reformat or self.pretty.color):
            self._write_raw(chunks)
            return True, False

        encoding = encoding or "utf-8"
        lexer = lexer_for(content_type)
        if not self.stream and length is not None and length <= MAX_BUFFERED_BODY:
            content, complete = _read_at_most(chunks, MAX_BUFFERED_BODY)
            if complete:
                return True, self._write_whole(content, encoding, lexer, reformat)
            chunks = chain([content], chunks)

        if self.pretty.color:
            self._write_lines(chunks, encoding, lexer)
        else:
            self._write_raw(chunks)
        return True, False

    def _write_whole(
        self, content: bytes, encoding: str, lexer: str, reformat: bool
    ) -> bool:
        text = content.decode(encoding, errors="replace")
        reformatted = False
        if reformat:
            formatted = format_json(text)
            if formatted is None:
                logger.debug("Body is not valid JSON, printing it unformatted")
            else:
                text = formatted
                reformatted = True
        if self.pretty.color:
            text = self._highlighter.highlight(text, lexer)
        self.buffer.write(text.encode("utf-8"))
        return reformatted

    def _write_raw(self, chunks: Iterable[bytes]) -> None:
        for chunk in chunks:
            self.buffer.write(chunk)
            if self.stream:
                self.buffer.flush()

    def _write_lines(self, chunks: Iterable[bytes], encoding: str, lexer: str) -> None:
        decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        pending = ""
        for chunk in chunks:
            pending += decoder.decode(chunk)
            *lines, pending = pending.split("\n")
            for line in lines:
                self._write_line(line, lexer, newline=True)
            # A body without line breaks is still written chunk by chunk.
            if len(pending) >= CHUNK_SIZE:
                self._write_line(pending, lexer, newline=False)
                pending = ""
            self.buffer.flush()
        pending += decoder.decode(b"", final=True)
        if pending:
            self._write_line(pending, lexer, newline=False)
            self.buffer.flush()

    def _write_line(self, line: str, lexer: str, newline: bool) -> None:
        text = self._highlighter.highlight(line, lexer)
        self.buffer.write(text.encode("utf-8") + (b"\n" if newline else b""))


def _read_at_most(chunks: Iterator[bytes], limit: int) -> tuple[bytes, bool]:
    """Read chunks until the stream ends or more than ``limit`` bytes arrived."""
    parts: list[bytes] = []
    size = 0
    for chunk in chunks:
        parts.append(chunk)
        size += len(chunk)
        if size > limit:
            return b"".join(parts), False
    return b"".join(parts), True


def _header_lines(headers: httpx.Headers) -> list[str]:
    encoding = headers.encoding
    return [
        f"{name.decode(encoding)}: {value.decode(encoding)}"
        for name, value in headers.raw
    ]
