import sys
from enum import Enum
from typing import BinaryIO, Optional

import click


class BufferKind(str, Enum):
    TERMINAL = "terminal"
    REDIRECT = "redirect"
    FILE = "file"
    STDERR = "stderr"


class Buffer:
    """Where printed output goes.

    In download mode the body is written by the download manager, so headers
    and notices go to stderr. With ``--output`` outside download mode the
    printed exchange goes to that file. Otherwise it goes to stdout, which is
    either a terminal or redirected.
    """

    def __init__(
        self,
        kind: BufferKind,
        stream: BinaryIO,
        is_terminal: bool,
        owns_stream: bool = False,
    ):
        self.kind = kind
        self.stream = stream
        self.is_terminal = is_terminal
        self._owns_stream = owns_stream

    @classmethod
    def create(
        cls,
        download: bool,
        output: Optional[str],
        stdout_is_terminal: Optional[bool] = None,
    ) -> "Buffer":
        if download:
            return cls(
                BufferKind.STDERR,
                sys.stderr.buffer,
                is_terminal=sys.stderr.isatty(),
            )
        if output:
            try:
                stream = open(output, "wb")
            except OSError as e:
                raise click.FileError(output, hint=e.strerror) from e
            return cls(BufferKind.FILE, stream, is_terminal=False, owns_stream=True)

        if stdout_is_terminal is None:
            stdout_is_terminal = sys.stdout.isatty()
        kind = BufferKind.TERMINAL if stdout_is_terminal else BufferKind.REDIRECT
        return cls(kind, sys.stdout.buffer, is_terminal=stdout_is_terminal)

    @property
    def is_redirect(self) -> bool:
        return self.kind == BufferKind.REDIRECT

    def write(self, data: bytes) -> None:
        self.stream.write(data)

    def flush(self) -> None:
        self.stream.flush()

    def close(self) -> None:
        self.flush()
        if self._owns_stream:
            self.stream.close()
