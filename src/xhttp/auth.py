import base64
from typing import Callable, Optional

import click


def parse_auth(
    auth: str, host: str, prompt: Optional[Callable[[str], str]] = None
) -> tuple[str, str]:
    """Split ``USER[:PASS]``, asking for the password when it is missing."""
    username, sep, password = auth.partition(":")
    if sep:
        return username, password
    if prompt is None:
        prompt = _prompt_password
    return username, prompt(f"xhttp: password for {username}@{host}")


def _prompt_password(message: str) -> str:
    return click.prompt(message, hide_input=True, err=True)


def basic_auth_header(username: str, password: str) -> str:
    credentials = f"{username}:{password}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


def bearer_auth_header(token: str) -> str:
    return f"Bearer {token}"
