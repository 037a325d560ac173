from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class JsonBody:
    """A JSON object body. Later duplicates of a name replace earlier ones."""

    fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FormBody:
    """A URL-encoded form body. Duplicate names are all sent, in order."""

    fields: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class MultipartBody:
    """A multipart form body: text parts first, then file parts."""

    fields: tuple[tuple[str, str], ...] = ()
    files: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class RawBody:
    """Bytes piped to the process, sent verbatim."""

    content: bytes = b""


Body = Union[JsonBody, FormBody, MultipartBody, RawBody]
