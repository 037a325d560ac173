from contextlib import contextmanager
from typing import Generator

import httpx

from ..models.errors import TransportError


@contextmanager
def handle_errors(url: str) -> Generator[None, None, None]:
    """Context manager for translating transport failures of a request.

    Wraps the send and the body read of a single exchange and converts
    httpx's transport-level errors into a ``TransportError`` naming the URL.
    HTTP status codes are not errors here; they are classified separately.

    Args:
        url: The URL of the request, used in the error message.

    Yields:
        None: The context manager yields control to the wrapped code.

    Raises:
        TransportError: For connection, TLS, timeout and redirect failures,
            and for response bodies that fail to decompress.
    """
    try:
        yield
    except httpx.TimeoutException as e:
        raise TransportError(url, f"timed out ({type(e).__name__})") from e
    except httpx.TooManyRedirects as e:
        raise TransportError(url, str(e) or "too many redirects") from e
    except httpx.TransportError as e:
        raise TransportError(url, str(e) or type(e).__name__) from e
    except httpx.DecodingError as e:
        raise TransportError(url, f"could not decode the response body: {e}") from e
