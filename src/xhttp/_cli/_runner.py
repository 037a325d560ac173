"""The request pipeline behind the ``xhttp`` command."""

import logging
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

import httpx

from .._utils._errors import handle_errors
from .._utils.constants import DEFAULT_STYLE, HEADER_AUTHORIZATION
from ..auth import basic_auth_header, bearer_auth_header, parse_auth
from ..buffer import Buffer
from ..client import (
    build_client,
    build_request,
    infer_method,
    read_stdin,
    resolve_body,
)
from ..download import DownloadManager
from ..exit_status import exit_status, redirect_warning
from ..models.print_options import Pretty, PrintOptions
from ..printer import Printer
from ..request_items import RequestItems
from ..url import construct_url
from ._utils._console import ConsoleLogger

logger = logging.getLogger(__name__)
console = ConsoleLogger()


@dataclass
class RequestOptions:
    url: str
    method: Optional[str] = None
    items: list[str] = field(default_factory=list)
    form: bool = False
    multipart: bool = False
    print_spec: Optional[str] = None
    headers: bool = False
    body: bool = False
    verbose: bool = False
    quiet: bool = False
    pretty: Optional[str] = None
    style: str = DEFAULT_STYLE
    stream: bool = False
    output: Optional[str] = None
    download: bool = False
    resume: bool = False
    follow: bool = False
    max_redirects: Optional[int] = None
    check_status: bool = False
    auth: Optional[str] = None
    bearer: Optional[str] = None
    verify: str = "yes"
    cert: Optional[str] = None
    cert_key: Optional[str] = None
    proxies: list[str] = field(default_factory=list)
    timeout: Optional[float] = None
    offline: bool = False
    ignore_stdin: bool = False
    default_scheme: Optional[str] = None


def run_request(
    options: RequestOptions,
    stdin: Optional[BinaryIO] = None,
    stdout_is_terminal: Optional[bool] = None,
) -> int:
    """Build, send and print one request and return the process exit code.

    Everything that can fail on user input is checked before the client
    sends anything.
    """
    items = RequestItems.from_tokens(options.items)
    headers, headers_to_unset = items.headers()
    url = construct_url(options.url, options.default_scheme, items.query())

    body = items.body(
        form=options.form or options.multipart, multipart=options.multipart
    )
    body = resolve_body(body, read_stdin(options.ignore_stdin, stdin))
    method = infer_method(options.method, body)

    extra_headers: dict[str, str] = {}
    downloader: Optional[DownloadManager] = None
    if options.download:
        downloader = DownloadManager(options.output, options.resume, options.quiet)
        extra_headers.update(downloader.prepare_request_headers())
    if options.auth is not None:
        username, password = parse_auth(options.auth, httpx.URL(url).host or "<host>")
        extra_headers[HEADER_AUTHORIZATION] = basic_auth_header(username, password)
    if options.bearer is not None:
        extra_headers[HEADER_AUTHORIZATION] = bearer_auth_header(options.bearer)

    client = build_client(
        follow=options.follow,
        max_redirects=options.max_redirects,
        verify=options.verify,
        cert=options.cert,
        cert_key=options.cert_key,
        proxies=options.proxies,
        timeout=options.timeout,
    )
    with client, ExitStack() as stack:
        request = build_request(
            client,
            method,
            url,
            body,
            headers,
            headers_to_unset,
            extra_headers=extra_headers,
            download=options.download,
            stack=stack,
        )

        buffer = Buffer.create(options.download, options.output, stdout_is_terminal)
        stack.callback(buffer.close)
        print_options = PrintOptions.resolve(
            print_spec=options.print_spec,
            verbose=options.verbose,
            headers=options.headers,
            body=options.body,
            quiet=options.quiet,
            offline=options.offline,
            download=options.download,
            is_terminal=buffer.is_terminal,
        )
        printer = Printer(
            Pretty.resolve(options.pretty, buffer.is_terminal),
            options.style,
            options.stream,
            buffer,
        )

        if print_options.request_headers:
            printer.print_request_headers(request)
        if print_options.request_body:
            printer.print_request_body(request)
        if options.offline:
            return 0

        with handle_errors(str(request.url)):
            response = client.send(request, stream=True)
            try:
                return _handle_response(
                    response, request, options, print_options, printer, buffer, downloader
                )
            finally:
                response.close()


def _handle_response(
    response: httpx.Response,
    request: httpx.Request,
    options: RequestOptions,
    print_options: PrintOptions,
    printer: Printer,
    buffer: Buffer,
    downloader: Optional[DownloadManager],
) -> int:
    logger.debug(f"Response: {response.status_code} {response.reason_phrase}")
    if print_options.response_headers:
        printer.print_response_headers(response)

    code = exit_status(
        response.status_code, options.follow, options.check_status, options.download
    )
    if buffer.is_redirect and code != 0:
        console.raw(
            "\n" + redirect_warning(response.status_code, response.reason_phrase) + "\n"
        )

    if downloader is not None:
        if code == 0:
            downloader.download(response, str(request.url))
    elif print_options.response_body:
        printer.print_response_body(response)
    return code
