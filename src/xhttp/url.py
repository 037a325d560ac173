import re
from typing import Optional, Sequence
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

import httpx

from ._utils.constants import DEFAULT_SCHEME
from .models.errors import InvalidUrl

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
SUPPORTED_SCHEMES = ("http", "https")


def construct_url(
    url: str,
    default_scheme: Optional[str] = None,
    query: Sequence[tuple[str, str]] = (),
) -> str:
    """Build the request URL from user input and query items.

    ``:3000/path`` is shorthand for ``localhost:3000/path``. A URL without a
    scheme gets ``default_scheme`` (or https). Query items are appended after
    any query string already present, in order and without deduplication.

    Raises:
        InvalidUrl: If the result is not a usable http(s) URL.
    """
    if url == ":" or url.startswith(":/"):
        url = "localhost" + url[1:]
    elif url.startswith(":"):
        url = "localhost" + url
    if not _SCHEME_RE.match(url):
        scheme = (default_scheme or DEFAULT_SCHEME).rstrip(":/")
        url = f"{scheme}://{url}"

    if query:
        url = _append_query(url, query)

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise InvalidUrl(url, str(e)) from e
    if parsed.scheme not in SUPPORTED_SCHEMES:
        raise InvalidUrl(url, f"unsupported scheme {parsed.scheme!r}")
    if not parsed.host:
        raise InvalidUrl(url, "missing host")
    return url


def _append_query(url: str, query: Sequence[tuple[str, str]]) -> str:
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise InvalidUrl(url, str(e)) from e
    extra = urlencode(list(query), quote_via=quote)
    combined = f"{parts.query}&{extra}" if parts.query else extra
    return urlunsplit(parts._replace(query=combined))
