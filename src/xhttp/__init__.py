"""xhttp: a friendly command line HTTP client."""

from ._utils import package_version
from .client import build_client, build_request
from .download import DownloadManager, DownloadResult, DownloadState
from .exit_status import exit_status
from .printer import Printer
from .request_items import RequestItems, parse_request_item
from .url import construct_url

__version__ = package_version()

__all__ = [
    "DownloadManager",
    "DownloadResult",
    "DownloadState",
    "Printer",
    "RequestItems",
    "build_client",
    "build_request",
    "construct_url",
    "exit_status",
    "parse_request_item",
]
