"""Resumable downloads of a response body to a file."""

import logging
import mimetypes
import re
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional
from urllib.parse import unquote

import httpx
from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

from ._utils.constants import (
    CHUNK_SIZE,
    HEADER_CONTENT_DISPOSITION,
    HEADER_CONTENT_LENGTH,
    HEADER_CONTENT_RANGE,
    HEADER_CONTENT_TYPE,
    HEADER_RANGE,
)
from .formatting import mime_type
from .models.errors import DownloadError

logger = logging.getLogger(__name__)

_CONTENT_RANGE_RE = re.compile(r"^\s*bytes\s+(\d+)-(\d+)/(\d+|\*)\s*$")
_FILENAME_STAR_RE = re.compile(r"filename\*\s*=\s*[^']*'[^']*'([^;]+)", re.IGNORECASE)
_FILENAME_RE = re.compile(r'filename\s*=\s*("([^"]*)"|[^;]+)', re.IGNORECASE)


class DownloadState(str, Enum):
    START = "start"
    RESUMING = "resuming"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class DownloadResult:
    path: Path
    bytes_written: int
    total: Optional[int]
    resumed_from: int = 0


def get_file_size(path: Optional[Path]) -> Optional[int]:
    if path is None or not path.is_file():
        return None
    return path.stat().st_size


def parse_content_range_start(value: Optional[str]) -> Optional[int]:
    """Return the first byte position of a ``Content-Range: bytes a-b/n`` header."""
    if not value:
        return None
    match = _CONTENT_RANGE_RE.match(value)
    if match is None:
        return None
    return int(match.group(1))


def filename_from_content_disposition(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    match = _FILENAME_STAR_RE.search(value)
    if match:
        filename = unquote(match.group(1).strip())
    else:
        match = _FILENAME_RE.search(value)
        if not match:
            return None
        filename = match.group(2) if match.group(2) is not None else match.group(1)
        filename = filename.strip()
    # Never let the server choose a directory.
    filename = Path(filename.replace("\\", "/")).name
    return filename or None


def derive_filename(response: httpx.Response, url: str) -> str:
    """Pick a file name for a response when no output path was given."""
    filename = filename_from_content_disposition(
        response.headers.get(HEADER_CONTENT_DISPOSITION)
    )
    if filename is None:
        segment = unquote(httpx.URL(url).path.rstrip("/").rsplit("/", 1)[-1])
        filename = Path(segment).name or "index"

    if not Path(filename).suffix:
        mime = mime_type(response.headers.get(HEADER_CONTENT_TYPE))
        extension = mimetypes.guess_extension(mime) if mime else None
        if extension:
            filename += extension
    return filename


def unique_path(path: Path) -> Path:
    """Return ``path``, or ``name-1.ext``, ``name-2.ext``... if it is taken."""
    if not path.exists():
        return path
    counter = 1
    while True:
        candidate = path.with_name(f"{path.stem}-{counter}{path.suffix}")
        if not candidate.exists():
            return candidate
        counter += 1


class _ProgressReporter:
    """Shows transfer progress on stderr.

    A failure here only disables the display; it never stops the transfer.
    """

    def __init__(self, console: Console, disabled: bool):
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None
        if disabled:
            return
        try:
            self._progress = Progress(
                BarColumn(),
                DownloadColumn(),
                TransferSpeedColumn(),
                TimeRemainingColumn(),
                console=console,
                transient=True,
            )
        except Exception as e:
            self._disable(e)

    def start(self, total: Optional[int], completed: int) -> None:
        if self._progress is None:
            return
        try:
            self._task = self._progress.add_task(
                "download", total=total, completed=completed
            )
            self._progress.start()
        except Exception as e:
            self._disable(e)

    def advance(self, size: int) -> None:
        if self._progress is None or self._task is None:
            return
        try:
            self._progress.update(self._task, advance=size)
        except Exception as e:
            self._disable(e)

    def stop(self) -> None:
        if self._progress is None:
            return
        try:
            self._progress.stop()
        except Exception as e:
            self._disable(e)

    def _disable(self, error: Exception) -> None:
        logger.debug(f"Progress reporting disabled: {error!r}")
        self._progress = None


class DownloadManager:
    """Downloads a response body to a file, optionally resuming a partial one.

    The resume offset changes the request headers, so
    ``prepare_request_headers`` must be called before the request is sent and
    ``download`` after the response arrives. A failed download leaves the
    partial file on disk; nothing is retried.
    """

    def __init__(
        self,
        output: Optional[str] = None,
        resume: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
    ):
        self.output = Path(output) if output else None
        self.resume = resume
        self.quiet = quiet
        self.state = DownloadState.START
        self.resume_offset: Optional[int] = None
        self._console = console or Console(stderr=True)

    def prepare_request_headers(self) -> dict[str, str]:
        """Return the ``Range`` header to send when resuming, if any."""
        if self.state != DownloadState.START:
            raise RuntimeError("Request headers were already prepared")
        if not self.resume:
            return {}

        size = get_file_size(self.output)
        if size is None:
            logger.debug(f"Nothing to resume at {self.output}, starting from scratch")
            return {}

        self.resume_offset = size
        self.state = DownloadState.RESUMING
        logger.debug(f"Resuming {self.output} from byte {size}")
        return {HEADER_RANGE: f"bytes={size}-"}

    def destination(self, response: httpx.Response, url: str) -> Path:
        if self.output is not None:
            return self.output
        return unique_path(Path(derive_filename(response, url)))

    def download(self, response: httpx.Response, url: str) -> DownloadResult:
        if self.state not in (DownloadState.START, DownloadState.RESUMING):
            raise RuntimeError(f"Cannot start a download in state {self.state.value}")

        path = self.destination(response, url)
        offset = 0
        mode = "wb"
        if self.resume_offset is not None:
            if response.status_code == httpx.codes.PARTIAL_CONTENT:
                start = parse_content_range_start(
                    response.headers.get(HEADER_CONTENT_RANGE)
                )
                if start != self.resume_offset:
                    self.state = DownloadState.FAILED
                    raise DownloadError(
                        str(path),
                        f"server resumed at byte {start}, expected {self.resume_offset}",
                    )
                offset = self.resume_offset
                mode = "ab"
            else:
                logger.warning(
                    f"Server ignored the range request (HTTP {response.status_code}), "
                    f"restarting the download of {path}"
                )

        length = response.headers.get(HEADER_CONTENT_LENGTH)
        total = offset + int(length) if length and length.isdigit() else None

        self.state = DownloadState.IN_PROGRESS
        self._announce(path, offset, total)
        progress = _ProgressReporter(self._console, disabled=self.quiet)
        written = 0
        started = time.monotonic()
        progress.start(total, offset)
        try:
            with open(path, mode) as file:
                for chunk in response.iter_raw(chunk_size=CHUNK_SIZE):
                    file.write(chunk)
                    written += len(chunk)
                    progress.advance(len(chunk))
        except OSError as e:
            self.state = DownloadState.FAILED
            raise DownloadError(str(path), e.strerror or str(e)) from e
        except httpx.TransportError:
            self.state = DownloadState.FAILED
            raise
        finally:
            progress.stop()

        self.state = DownloadState.COMPLETE
        elapsed = time.monotonic() - started
        if not self.quiet:
            self._console.print(
                f"Done. {_format_size(written)} in {elapsed:.2f}s", highlight=False
            )
        return DownloadResult(
            path=path, bytes_written=written, total=total, resumed_from=offset
        )

    def _announce(self, path: Path, offset: int, total: Optional[int]) -> None:
        if self.quiet:
            return
        size = f" {_format_size(total)}" if total is not None else ""
        if offset:
            message = f'Resuming download of{size} to "{path}" from byte {offset}'
        else:
            message = f'Downloading{size} to "{path}"'
        self._console.print(message, highlight=False, markup=False)


def _format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "kB", "MB", "GB"):
        if value < 1000 or unit == "GB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.2f} {unit}"
        value /= 1000
    return f"{value:.2f} GB"
