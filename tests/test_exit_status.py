import pytest

from xhttp.exit_status import exit_status, redirect_warning


@pytest.mark.parametrize("follow", [True, False])
def test_success_is_zero(follow):
    assert exit_status(200, follow, True, False) == 0


def test_redirect_without_follow():
    assert exit_status(301, False, True, False) == 3


def test_redirect_with_follow_is_zero():
    assert exit_status(301, True, True, False) == 0


@pytest.mark.parametrize("follow", [True, False])
def test_client_error(follow):
    assert exit_status(404, follow, True, False) == 4


def test_server_error():
    assert exit_status(503, False, True, False) == 5


@pytest.mark.parametrize("status", [200, 302, 404, 503])
def test_without_check_status_is_always_zero(status):
    assert exit_status(status, False, False, False) == 0


def test_download_implies_status_check():
    assert exit_status(404, False, False, True) == 4
    assert exit_status(500, True, False, True) == 5


def test_informational_and_unknown_are_zero():
    assert exit_status(101, False, True, False) == 0
    assert exit_status(600, False, True, False) == 0


def test_redirect_warning():
    assert redirect_warning(404, "Not Found") == "xhttp: warning: HTTP 404 Not Found"
    assert redirect_warning(599) == "xhttp: warning: HTTP 599"
