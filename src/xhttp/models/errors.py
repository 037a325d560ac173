class XhttpError(Exception):
    """Base class for errors reported to the user before exiting."""

    exit_code = 1

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class MalformedRequestItem(XhttpError):
    def __init__(self, token: str, reason: str = "no separator found"):
        self.token = token
        self.reason = reason
        super().__init__(f"Invalid request item {token!r}: {reason}")


class IncompatibleBodyFields(XhttpError):
    """Raised when the request items cannot share a single body encoding.

    JSON fields (``name:=value``) cannot be sent together with file fields
    (``name@path``), and they have no encoding in form mode.
    """


class ConflictingBodySources(XhttpError):
    def __init__(
        self,
        message="Request body (from stdin) and request data (key=value) cannot be mixed. "
        "Pass --ignore-stdin to drop the piped input.",
    ):
        super().__init__(message)


class InvalidUrl(XhttpError):
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}: {reason}")


class TransportError(XhttpError):
    """Raised when the request could not be completed at the transport level.

    Covers connection failures, TLS errors, timeouts and redirect loops. No
    HTTP status is associated with these, so they never map to exit codes
    3, 4 or 5.
    """

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Request to {url} failed: {reason}")


class DownloadError(XhttpError):
    """Raised when a download cannot be written to disk.

    The partially written file is left in place so a later run can resume it.
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Download to {path} failed: {reason}")
