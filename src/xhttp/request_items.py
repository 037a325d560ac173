"""Classification of ``key<sep>value`` tokens and the views derived from them.

A token is split at the first unescaped separator. Separators are tried
longest first at each position, so ``a:=1`` is a JSON field and ``a==1`` a
query parameter rather than a header or a data field.
"""

import json
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .models.body import Body, FormBody, JsonBody, MultipartBody
from .models.errors import IncompatibleBodyFields, MalformedRequestItem
from .models.request_items import (
    DataField,
    FileField,
    HeaderToSet,
    HeaderToUnset,
    JsonField,
    RequestItem,
    UrlQueryParam,
)

SEP_QUERY = "=="
SEP_JSON = ":="
SEP_HEADER = ":"
SEP_DATA = "="
SEP_FILE = "@"

SEPARATORS = (SEP_QUERY, SEP_JSON, SEP_HEADER, SEP_DATA, SEP_FILE)
ESCAPABLE = frozenset(":=@\\")


def _split(token: str) -> tuple[str, str, str]:
    """Split a token into its unescaped name, separator and raw value."""
    name: list[str] = []
    i = 0
    while i < len(token):
        char = token[i]
        if char == "\\":
            if i + 1 >= len(token):
                raise MalformedRequestItem(token, "trailing backslash")
            escaped = token[i + 1]
            if escaped not in ESCAPABLE:
                raise MalformedRequestItem(token, f"invalid escape '\\{escaped}'")
            name.append(escaped)
            i += 2
            continue
        for sep in SEPARATORS:
            if token.startswith(sep, i):
                return "".join(name), sep, token[i + len(sep) :]
        name.append(char)
        i += 1
    raise MalformedRequestItem(token)


def _check_header(token: str, name: str, value: str) -> None:
    # httpx encodes header names and values as ASCII.
    try:
        name.encode("ascii")
        value.encode("ascii")
    except UnicodeEncodeError as e:
        raise MalformedRequestItem(
            token, "header names and values must be ASCII"
        ) from e


def parse_request_item(token: str) -> RequestItem:
    """Classify a single raw token.

    Args:
        token: A command line argument such as ``X-Api-Key:abc`` or ``age:=30``.

    Returns:
        RequestItem: The variant selected by the token's separator.

    Raises:
        MalformedRequestItem: If no separator is found, the name is empty,
            the name holds an invalid escape, a ``:=`` value is not JSON, or
            a header name or value is not ASCII.
    """
    name, sep, value = _split(token)
    if not name:
        raise MalformedRequestItem(token, "missing name before separator")

    if sep == SEP_HEADER:
        _check_header(token, name, value)
        if value == "":
            return HeaderToUnset(name)
        return HeaderToSet(name, value.strip())
    if sep == SEP_QUERY:
        return UrlQueryParam(name, value)
    if sep == SEP_JSON:
        try:
            parsed = json.loads(value)
        except ValueError as e:
            raise MalformedRequestItem(token, f"invalid JSON value ({e})") from e
        return JsonField(name, parsed)
    if sep == SEP_DATA:
        return DataField(name, value)
    return FileField(name, value)


@dataclass(frozen=True)
class RequestItems:
    """The classified request items, in command line order."""

    items: tuple[RequestItem, ...] = ()

    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> "RequestItems":
        return cls(tuple(parse_request_item(token) for token in tokens))

    def headers(self) -> tuple[dict[str, str], list[str]]:
        """Return the headers to set and the names of headers to unset.

        Names are compared case-insensitively; the last ``name:value`` wins
        and keeps the spelling it was given with.
        """
        headers: dict[str, tuple[str, str]] = {}
        headers_to_unset: list[str] = []
        for item in self.items:
            if isinstance(item, HeaderToSet):
                headers[item.name.lower()] = (item.name, item.value)
            elif isinstance(item, HeaderToUnset):
                headers.pop(item.name.lower(), None)
                headers_to_unset.append(item.name)
        return dict(headers.values()), headers_to_unset

    def query(self) -> list[tuple[str, str]]:
        return [
            (item.name, item.value)
            for item in self.items
            if isinstance(item, UrlQueryParam)
        ]

    def has_body_items(self) -> bool:
        return any(
            isinstance(item, (JsonField, DataField, FileField)) for item in self.items
        )

    def body(self, form: bool = False, multipart: bool = False) -> Optional[Body]:
        """Assemble the request body from the data, JSON and file fields.

        Args:
            form: Encode as a form instead of a JSON object.
            multipart: Use multipart encoding even without file fields.

        Returns:
            The body, or ``None`` if no item contributes to it.

        Raises:
            IncompatibleBodyFields: If file fields are combined with a JSON
                body, or JSON fields are used in form mode.
        """
        if not form:
            return self._json_body()

        text_fields: list[tuple[str, str]] = []
        files: list[tuple[str, str]] = []
        for item in self.items:
            if isinstance(item, JsonField):
                raise IncompatibleBodyFields(
                    f"JSON values are not supported in form fields: {item.name!r}"
                )
            elif isinstance(item, DataField):
                text_fields.append((item.name, item.value))
            elif isinstance(item, FileField):
                files.append((item.name, item.path))

        if not text_fields and not files:
            return None
        if files or multipart:
            return MultipartBody(fields=tuple(text_fields), files=tuple(files))
        return FormBody(fields=tuple(text_fields))

    def _json_body(self) -> Optional[JsonBody]:
        fields: dict[str, Any] = {}
        for item in self.items:
            if isinstance(item, FileField):
                raise IncompatibleBodyFields(
                    f"Sending files is not supported when the request body is JSON: "
                    f"{item.name!r}. Use --form or --multipart."
                )
            elif isinstance(item, JsonField):
                fields[item.name] = item.value
            elif isinstance(item, DataField):
                fields[item.name] = item.value
        if not fields:
            return None
        return JsonBody(fields=fields)
