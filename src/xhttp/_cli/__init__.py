import click

from .._config import XhttpConfig
from .._utils import package_version
from .._utils._logs import setup_logging
from .._utils.constants import (
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_STYLE,
    ENV_DEFAULT_SCHEME,
    ENV_STYLE,
    ENV_TIMEOUT,
)
from ..client import split_method
from ..models.errors import XhttpError
from ..models.print_options import Pretty
from ._runner import RequestOptions, run_request
from ._utils._console import ConsoleLogger

console = ConsoleLogger()


class XhttpCommand(click.Command):
    """Command that reads ``default_options`` from the config file first."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            config = XhttpConfig.load()
        except XhttpError as e:
            raise click.ClickException(e.message) from e
        return super().parse_args(ctx, [*config.default_options, *args])


@click.command(
    cls=XhttpCommand,
    context_settings={"help_option_names": ["--help"]},
)
@click.argument("args", nargs=-1, required=True, metavar="[METHOD] URL [REQUEST_ITEM]...")
@click.option("-j", "--json", "json_", is_flag=True, help="Send data as a JSON object (default)")
@click.option("-f", "--form", is_flag=True, help="Send data as a URL-encoded form")
@click.option(
    "--multipart", is_flag=True, help="Send data as a multipart form, even without files"
)
@click.option(
    "-p",
    "--print",
    "print_spec",
    metavar="WHAT",
    help="Parts to print: H request headers, B request body, h response headers, b response body",
)
@click.option("-h", "--headers", is_flag=True, help="Print only the response headers")
@click.option("-b", "--body", is_flag=True, help="Print only the response body")
@click.option("-v", "--verbose", is_flag=True, help="Print the whole request and response")
@click.option("-q", "--quiet", is_flag=True, help="Do not print anything")
@click.option(
    "--pretty",
    type=click.Choice([p.value for p in Pretty]),
    default=None,
    help="Output processing; defaults to 'all' on a terminal and 'none' otherwise",
)
@click.option(
    "-s",
    "--style",
    default=DEFAULT_STYLE,
    show_default=True,
    envvar=ENV_STYLE,
    help=f"Syntax highlighting theme (env: {ENV_STYLE})",
)
@click.option("-S", "--stream", is_flag=True, help="Print the response body as it arrives")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False),
    help="Write output to a file instead of stdout",
)
@click.option("-d", "--download", is_flag=True, help="Download the body to a file")
@click.option(
    "-c",
    "--continue",
    "resume",
    is_flag=True,
    help="Resume an interrupted download (requires --download and --output)",
)
@click.option("-F", "--follow", is_flag=True, help="Follow redirects")
@click.option(
    "--max-redirects",
    type=click.IntRange(min=0),
    default=DEFAULT_MAX_REDIRECTS,
    show_default=True,
    help="Number of redirects to follow",
)
@click.option(
    "--check-status",
    is_flag=True,
    help="Exit with 3, 4 or 5 on redirect, client error or server error responses",
)
@click.option("-a", "--auth", metavar="USER[:PASS]", help="Basic authentication")
@click.option("--bearer", metavar="TOKEN", help="Bearer token authentication")
@click.option(
    "--verify",
    default="yes",
    show_default=True,
    help="Verify TLS certificates: yes, no, or the path of a CA bundle",
)
@click.option("--cert", type=click.Path(exists=True, dir_okay=False), help="Client certificate")
@click.option(
    "--cert-key",
    type=click.Path(exists=True, dir_okay=False),
    help="Private key of the client certificate",
)
@click.option(
    "--proxy",
    "proxies",
    multiple=True,
    metavar="PROTOCOL:URL",
    help="Proxy for http, https or all requests; may be repeated",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    envvar=ENV_TIMEOUT,
    help=f"Seconds to wait for the server (env: {ENV_TIMEOUT})",
)
@click.option("--offline", is_flag=True, help="Build and print the request without sending it")
@click.option("--ignore-stdin", is_flag=True, help="Do not read the request body from stdin")
@click.option(
    "--default-scheme",
    envvar=ENV_DEFAULT_SCHEME,
    help=f"Scheme for URLs given without one (env: {ENV_DEFAULT_SCHEME})",
)
@click.option("--debug", is_flag=True, help="Log debugging information to stderr")
@click.version_option(version=package_version(), prog_name="xhttp")
@click.pass_context
def cli(
    ctx: click.Context,
    args: tuple[str, ...],
    json_: bool,
    form: bool,
    multipart: bool,
    print_spec: str | None,
    headers: bool,
    body: bool,
    verbose: bool,
    quiet: bool,
    pretty: str | None,
    style: str,
    stream: bool,
    output: str | None,
    download: bool,
    resume: bool,
    follow: bool,
    max_redirects: int,
    check_status: bool,
    auth: str | None,
    bearer: str | None,
    verify: str,
    cert: str | None,
    cert_key: str | None,
    proxies: tuple[str, ...],
    timeout: float | None,
    offline: bool,
    ignore_stdin: bool,
    default_scheme: str | None,
    debug: bool,
) -> None:
    r"""Send an HTTP request and print the exchange.

    \b
    Request items:
        Name:value     set a request header
        Name:          remove a request header
        name==value    add a URL query parameter
        name=value     add a string field to the body
        name:=json     add a JSON value to the body
        name@path      attach a file (form mode)

    \b
    Examples:
        xhttp httpbin.org/get page==2
        xhttp POST httpbin.org/post name=Bob age:=30 X-Api-Key:abc
        xhttp -f POST :8000/upload title=cat avatar@./cat.png
        xhttp -d -c -o big.iso example.com/big.iso
    """
    setup_logging(debug)

    if json_ and (form or multipart):
        raise click.UsageError("--json cannot be combined with --form or --multipart")
    if resume and not download:
        raise click.UsageError("--continue only works with --download")
    if resume and not output:
        raise click.UsageError("--continue requires --output")
    if print_spec is not None and set(print_spec) - set("HBhb"):
        raise click.BadParameter(
            "only the letters H, B, h and b are allowed", param_hint="--print"
        )

    try:
        method, url, items = split_method(args)
        exit_code = run_request(
            RequestOptions(
                url=url,
                method=method,
                items=items,
                form=form,
                multipart=multipart,
                print_spec=print_spec,
                headers=headers,
                body=body,
                verbose=verbose,
                quiet=quiet,
                pretty=pretty,
                style=style,
                stream=stream,
                output=output,
                download=download,
                resume=resume,
                follow=follow,
                max_redirects=max_redirects,
                check_status=check_status,
                auth=auth,
                bearer=bearer,
                verify=verify,
                cert=cert,
                cert_key=cert_key,
                proxies=list(proxies),
                timeout=timeout,
                offline=offline,
                ignore_stdin=ignore_stdin,
                default_scheme=default_scheme,
            )
        )
    except XhttpError as e:
        console.error(e.message, exit_code=e.exit_code)
        return

    ctx.exit(exit_code)


def main() -> None:
    cli(prog_name="xhttp")


__all__ = ["cli", "main"]
