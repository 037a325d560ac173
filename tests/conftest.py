import io
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from xhttp._config import XhttpConfig
from xhttp.buffer import Buffer, BufferKind


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate every test from the user's environment and config file."""
    monkeypatch.delenv("XHTTP_DEFAULT_SCHEME", raising=False)
    monkeypatch.delenv("XHTTP_STYLE", raising=False)
    monkeypatch.delenv("XHTTP_TIMEOUT", raising=False)
    monkeypatch.setenv("XHTTP_CONFIG_DIR", str(tmp_path / "config"))
    XhttpConfig.reset()
    yield
    XhttpConfig.reset()


@pytest.fixture
def output() -> io.BytesIO:
    return io.BytesIO()


@pytest.fixture
def redirect_buffer(output: io.BytesIO) -> Buffer:
    return Buffer(BufferKind.REDIRECT, output, is_terminal=False)


@pytest.fixture
def terminal_buffer(output: io.BytesIO) -> Buffer:
    return Buffer(BufferKind.TERMINAL, output, is_terminal=True)


@pytest.fixture
def client() -> httpx.Client:
    with httpx.Client() as c:
        yield c
