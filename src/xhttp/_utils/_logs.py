import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("xhttp")


def setup_logging(debug: bool = False) -> None:
    """Send the package's log records to stderr.

    Only warnings are shown unless ``debug`` is set, in which case the
    request line, headers and download decisions are logged as well.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=debug,
        show_path=debug,
        markup=False,
        rich_tracebacks=debug,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
