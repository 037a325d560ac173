def exit_status(
    status_code: int, follow: bool, check_status: bool, download: bool
) -> int:
    """Map an HTTP status to the process exit code.

    Only ``--check-status`` and ``--download`` make a status fatal; without
    them every response exits 0.
    """
    if not (check_status or download):
        return 0
    if 300 <= status_code < 400 and not follow:
        return 3
    if 400 <= status_code < 500:
        return 4
    if 500 <= status_code < 600:
        return 5
    return 0


def redirect_warning(status_code: int, reason: str = "") -> str:
    return f"xhttp: warning: HTTP {status_code} {reason}".rstrip()
