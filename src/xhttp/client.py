"""Construction of the httpx client and of the outgoing request."""

import json
import logging
import ssl
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Any, BinaryIO, Mapping, Optional, Sequence, Union
from urllib.parse import urlencode

import httpx

from ._utils import user_agent_value
from ._utils._ssl_context import get_verify
from ._utils.constants import (
    ACCEPT_ANY,
    ACCEPT_JSON,
    CONNECTION_KEEP_ALIVE,
    CONTENT_TYPE_FORM,
    CONTENT_TYPE_JSON,
    DEFAULT_MAX_REDIRECTS,
    ENCODING_COMPRESSED,
    ENCODING_IDENTITY,
    HEADER_ACCEPT,
    HEADER_ACCEPT_ENCODING,
    HEADER_CONNECTION,
    HEADER_CONTENT_TYPE,
    HEADER_USER_AGENT,
)
from .models.body import Body, FormBody, JsonBody, MultipartBody, RawBody
from .models.errors import ConflictingBodySources, XhttpError

logger = logging.getLogger(__name__)

HTTP_METHODS = frozenset(
    ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"]
)
PROXY_PROTOCOLS = {"http": ("http://",), "https": ("https://",), "all": ("all://",)}


def split_method(args: Sequence[str]) -> tuple[Optional[str], str, list[str]]:
    """Split ``[METHOD] URL [ITEM...]`` into its three parts."""
    if not args:
        raise XhttpError("Missing URL")
    first, rest = args[0], list(args[1:])
    if first.upper() in HTTP_METHODS and rest:
        return first.upper(), rest[0], rest[1:]
    return None, first, rest


def infer_method(method: Optional[str], body: Optional[Body]) -> str:
    if method:
        return method.upper()
    return "POST" if body is not None else "GET"


def read_stdin(ignore_stdin: bool, stdin: Optional[BinaryIO] = None) -> Optional[bytes]:
    """Read piped input, or return ``None`` when there is none to read."""
    if ignore_stdin:
        return None
    if stdin is None:
        if sys.stdin is None or sys.stdin.isatty():
            return None
        stdin = sys.stdin.buffer
    content = stdin.read()
    return content or None


def resolve_body(body: Optional[Body], stdin_content: Optional[bytes]) -> Optional[Body]:
    """Combine the assembled body with piped input.

    Raises:
        ConflictingBodySources: If both are present.
    """
    if stdin_content is None:
        return body
    if body is not None:
        raise ConflictingBodySources()
    return RawBody(content=stdin_content)


def body_headers(body: Optional[Body]) -> dict[str, str]:
    """Return the Accept and Content-Type headers implied by a body."""
    if body is None:
        return {HEADER_ACCEPT: ACCEPT_ANY}
    if isinstance(body, (JsonBody, RawBody)):
        return {HEADER_ACCEPT: ACCEPT_JSON, HEADER_CONTENT_TYPE: CONTENT_TYPE_JSON}
    if isinstance(body, FormBody):
        return {HEADER_ACCEPT: ACCEPT_ANY, HEADER_CONTENT_TYPE: CONTENT_TYPE_FORM}
    if isinstance(body, MultipartBody):
        # httpx sets the content type with its boundary.
        return {HEADER_ACCEPT: ACCEPT_ANY}
    raise TypeError(f"Unknown body type: {type(body).__name__}")


def default_headers(download: bool = False) -> dict[str, str]:
    return {
        HEADER_USER_AGENT: user_agent_value(),
        HEADER_ACCEPT_ENCODING: ENCODING_IDENTITY if download else ENCODING_COMPRESSED,
        HEADER_CONNECTION: CONNECTION_KEEP_ALIVE,
    }


def body_kwargs(body: Optional[Body], stack: ExitStack) -> dict[str, Any]:
    """Translate a body into keyword arguments for ``httpx.Client.build_request``.

    File fields are opened on ``stack`` and stay open until it is closed,
    which must happen after the request was sent.
    """
    if body is None:
        return {}
    if isinstance(body, JsonBody):
        content = json.dumps(body.fields, ensure_ascii=False, separators=(",", ":"))
        return {"content": content.encode("utf-8")}
    if isinstance(body, FormBody):
        return {"content": urlencode(list(body.fields)).encode("ascii")}
    if isinstance(body, RawBody):
        return {"content": body.content}
    if isinstance(body, MultipartBody):
        files: list[tuple[str, Any]] = [
            (name, (None, value.encode("utf-8"))) for name, value in body.fields
        ]
        for name, path in body.files:
            file_path = Path(path).expanduser()
            try:
                handle = stack.enter_context(open(file_path, "rb"))
            except OSError as e:
                raise XhttpError(
                    f"Cannot read file field {name!r} ({path}): {e.strerror or e}"
                ) from e
            files.append((name, (file_path.name, handle)))
        return {"files": files}
    raise TypeError(f"Unknown body type: {type(body).__name__}")


def build_request(
    client: httpx.Client,
    method: str,
    url: str,
    body: Optional[Body],
    headers: Mapping[str, str],
    headers_to_unset: Sequence[str] = (),
    extra_headers: Optional[Mapping[str, str]] = None,
    download: bool = False,
    stack: Optional[ExitStack] = None,
) -> httpx.Request:
    """Assemble the final request.

    Headers are layered: defaults, then body-derived headers, then
    ``extra_headers`` (auth, range), then the user's ``name:value`` items.
    ``name:`` items are removed last, whatever set them.
    """
    merged = httpx.Headers(default_headers(download))
    merged.update(body_headers(body))
    merged.update(extra_headers or {})
    merged.update(headers)

    request = client.build_request(
        method,
        url,
        headers=merged,
        **body_kwargs(body, stack if stack is not None else ExitStack()),
    )
    for name in headers_to_unset:
        request.headers.pop(name, None)

    logger.debug(f"Request: {request.method} {request.url}")
    logger.debug(f"HEADERS: {dict(request.headers)}")
    return request


def parse_proxy(value: str) -> tuple[str, str]:
    """Split ``PROTOCOL:URL`` as given to ``--proxy``."""
    protocol, sep, url = value.partition(":")
    protocol = protocol.lower()
    if not sep or protocol not in PROXY_PROTOCOLS or not _has_scheme(url):
        raise XhttpError(
            f"Invalid proxy {value!r}: expected PROTOCOL:URL with PROTOCOL one of "
            + ", ".join(PROXY_PROTOCOLS)
        )
    return protocol, url


def _has_scheme(url: str) -> bool:
    # "http://proxy" splits into protocol "http" and "//proxy".
    try:
        return bool(url) and bool(httpx.URL(url).scheme)
    except httpx.InvalidURL:
        return False


def build_client(
    follow: bool = False,
    max_redirects: Optional[int] = None,
    verify: str = "yes",
    cert: Optional[str] = None,
    cert_key: Optional[str] = None,
    proxies: Sequence[str] = (),
    timeout: Optional[float] = None,
) -> httpx.Client:
    try:
        verify_value: Union[ssl.SSLContext, bool] = get_verify(verify, cert, cert_key)
    except OSError as e:
        raise XhttpError(f"Failed to load TLS configuration: {e}") from e

    mounts: dict[str, httpx.HTTPTransport] = {}
    for value in proxies:
        protocol, proxy_url = parse_proxy(value)
        for pattern in PROXY_PROTOCOLS[protocol]:
            # The first --proxy given for a protocol wins.
            if pattern not in mounts:
                mounts[pattern] = httpx.HTTPTransport(proxy=proxy_url, verify=verify_value)

    return httpx.Client(
        follow_redirects=follow,
        max_redirects=max_redirects if max_redirects is not None else DEFAULT_MAX_REDIRECTS,
        verify=verify_value,
        timeout=httpx.Timeout(timeout),
        mounts=mounts or None,
        trust_env=True,
    )
