from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Pretty(str, Enum):
    ALL = "all"
    COLORS = "colors"
    FORMAT = "format"
    NONE = "none"

    @property
    def color(self) -> bool:
        return self in (Pretty.ALL, Pretty.COLORS)

    @property
    def format(self) -> bool:
        return self in (Pretty.ALL, Pretty.FORMAT)

    @classmethod
    def resolve(cls, pretty: Optional[str], is_terminal: bool) -> "Pretty":
        if pretty:
            return cls(pretty)
        return cls.ALL if is_terminal else cls.NONE


@dataclass(frozen=True)
class PrintOptions:
    """Which parts of the exchange are printed."""

    request_headers: bool = False
    request_body: bool = False
    response_headers: bool = False
    response_body: bool = False

    @classmethod
    def from_spec(cls, spec: str) -> "PrintOptions":
        """Parse a ``--print`` value made of the letters ``H``, ``B``, ``h`` and ``b``."""
        unknown = set(spec) - set("HBhb")
        if unknown:
            raise ValueError(f"unknown print flags: {''.join(sorted(unknown))}")
        return cls(
            request_headers="H" in spec,
            request_body="B" in spec,
            response_headers="h" in spec,
            response_body="b" in spec,
        )

    @classmethod
    def resolve(
        cls,
        *,
        print_spec: Optional[str] = None,
        verbose: bool = False,
        headers: bool = False,
        body: bool = False,
        quiet: bool = False,
        offline: bool = False,
        download: bool = False,
        is_terminal: bool = False,
    ) -> "PrintOptions":
        if print_spec is not None:
            return cls.from_spec(print_spec)
        if verbose:
            return cls(True, True, True, True)
        if quiet:
            return cls()
        if offline:
            return cls(request_headers=True, request_body=True)
        if headers:
            return cls(response_headers=True)
        if body:
            return cls(response_body=True)
        if download:
            return cls(response_headers=True)
        if is_terminal:
            return cls(response_headers=True, response_body=True)
        return cls(response_body=True)
