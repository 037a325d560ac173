from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class HeaderToSet:
    name: str
    value: str


@dataclass(frozen=True)
class HeaderToUnset:
    name: str


@dataclass(frozen=True)
class UrlQueryParam:
    name: str
    value: str


@dataclass(frozen=True)
class JsonField:
    """A body field whose value was parsed as a JSON literal (``name:=value``)."""

    name: str
    value: Any


@dataclass(frozen=True)
class DataField:
    """A body field whose value is always sent as a string (``name=value``)."""

    name: str
    value: str


@dataclass(frozen=True)
class FileField:
    name: str
    path: str


RequestItem = Union[
    HeaderToSet, HeaderToUnset, UrlQueryParam, JsonField, DataField, FileField
]
