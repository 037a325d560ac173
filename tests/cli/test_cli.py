import json

import httpx
import pytest
from click.testing import CliRunner
from pytest_httpx import HTTPXMock, IteratorStream

from xhttp._cli import cli


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config" / "config.json"
    path.parent.mkdir()
    return path


class TestRequests:
    def test_json_post(self, runner: CliRunner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url="https://example.com/post",
            method="POST",
            headers={"Content-Type": "application/json"},
            content=b'{"ok": true}',
        )

        result = runner.invoke(
            cli,
            ["POST", "example.com/post", "name=Bob", "age:=30", "X-Api-Key:abc"],
        )

        assert result.exit_code == 0, result.output
        assert result.stdout == '{"ok": true}'
        request = httpx_mock.get_request()
        assert json.loads(request.content) == {"name": "Bob", "age": 30}
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Accept"] == "application/json, */*"
        assert request.headers["X-Api-Key"] == "abc"

    def test_method_is_inferred_from_body(self, runner: CliRunner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url="https://example.com/items", method="POST")

        result = runner.invoke(cli, ["example.com/items", "name=Bob"])

        assert result.exit_code == 0, result.output

    def test_query_and_unset_header(self, runner: CliRunner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url="https://localhost:8000/search?q=hello+world&page=2", method="GET"
        )

        result = runner.invoke(
            cli, [":8000/search", "q==hello world", "page==2", "User-Agent:"]
        )

        assert result.exit_code == 0, result.output
        assert "User-Agent" not in httpx_mock.get_request().headers

    def test_form(self, runner: CliRunner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url="https://example.com/login",
            method="POST",
            match_headers={"Content-Type": "application/x-www-form-urlencoded"},
            match_content=b"user=bob&remember=yes",
        )

        result = runner.invoke(
            cli, ["-f", "POST", "example.com/login", "user=bob", "remember=yes"]
        )

        assert result.exit_code == 0, result.output

    def test_stdin_is_the_raw_body(self, runner: CliRunner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url="https://example.com/post", method="POST", match_content=b"[1, 2, 3]"
        )

        result = runner.invoke(cli, ["example.com/post"], input="[1, 2, 3]")

        assert result.exit_code == 0, result.output

    def test_ignore_stdin(self, runner: CliRunner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url="https://example.com/get", method="GET")

        result = runner.invoke(
            cli, ["--ignore-stdin", "example.com/get"], input="ignored"
        )

        assert result.exit_code == 0, result.output

    def test_basic_auth(self, runner: CliRunner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url="https://example.com/private",
            match_headers={"Authorization": "Basic dXNlcjpwYXNz"},
        )

        result = runner.invoke(cli, ["-a", "user:pass", "example.com/private"])

        assert result.exit_code == 0, result.output

    def test_bearer_auth(self, runner: CliRunner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url="https://example.com/private",
            match_headers={"Authorization": "Bearer token123"},
        )

        result = runner.invoke(cli, ["--bearer", "token123", "example.com/private"])

        assert result.exit_code == 0, result.output

    def test_print_response_headers(self, runner: CliRunner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url="https://example.com/",
            headers={"Content-Type": "text/plain"},
            content=b"hi",
        )

        result = runner.invoke(cli, ["-p", "hb", "example.com/"])

        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("HTTP/1.1 200 OK\n")
        assert "Content-Type: text/plain\n" in result.stdout
        assert result.stdout.endswith("\n\nhi")

    def test_transport_error(self, runner: CliRunner, httpx_mock: HTTPXMock):
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"))

        result = runner.invoke(cli, ["example.com/"])

        assert result.exit_code == 1
        assert "Request to https://example.com/ failed: Connection refused" in result.stderr


    def test_undecodable_body(self, runner: CliRunner, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url="https://example.com/",
            headers={"Content-Encoding": "gzip", "Content-Type": "text/plain"},
            content=b"not gzip at all",
        )

        result = runner.invoke(cli, ["example.com/"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Request to https://example.com/ failed" in result.stderr


class TestOffline:
    def test_prints_request_without_sending(self, runner: CliRunner):
        result = runner.invoke(cli, ["--offline", "PUT", "example.com/items/1", "a=1"])

        assert result.exit_code == 0, result.output
        lines = result.stdout.split("\n")
        assert lines[0] == "PUT /items/1 HTTP/1.1"
        assert "Host: example.com" in lines
        assert "Content-Type: application/json" in lines
        assert result.stdout.endswith('{"a":"1"}\n\n')


class TestExitStatus:
    def test_error_status_is_success_by_default(
        self, runner: CliRunner, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(url="https://example.com/missing", status_code=404)

        result = runner.invoke(cli, ["example.com/missing"])

        assert result.exit_code == 0
        assert "warning" not in result.stderr

    @pytest.mark.parametrize("status_code,exit_code", [(302, 3), (404, 4), (503, 5)])
    def test_check_status(
        self, runner: CliRunner, httpx_mock: HTTPXMock, status_code, exit_code
    ):
        httpx_mock.add_response(url="https://example.com/", status_code=status_code)

        result = runner.invoke(cli, ["--check-status", "example.com/"])

        assert result.exit_code == exit_code
        reason = httpx.codes.get_reason_phrase(status_code)
        assert f"xhttp: warning: HTTP {status_code} {reason}" in result.stderr

    def test_check_status_from_config(
        self, runner: CliRunner, httpx_mock: HTTPXMock, config_file
    ):
        config_file.write_text(json.dumps({"default_options": ["--check-status"]}))
        httpx_mock.add_response(url="https://example.com/", status_code=404)

        result = runner.invoke(cli, ["example.com/"])

        assert result.exit_code == 4


class TestInputErrors:
    def test_malformed_item(self, runner: CliRunner, httpx_mock: HTTPXMock):
        result = runner.invoke(cli, ["example.com", "nonsense"])

        assert result.exit_code == 1
        assert "Invalid request item 'nonsense'" in result.stderr
        assert httpx_mock.get_requests() == []

    def test_json_field_in_form_mode(self, runner: CliRunner, httpx_mock: HTTPXMock):
        result = runner.invoke(cli, ["-f", "example.com", "age:=30"])

        assert result.exit_code == 1
        assert httpx_mock.get_requests() == []

    def test_stdin_with_data_items(self, runner: CliRunner, httpx_mock: HTTPXMock):
        result = runner.invoke(cli, ["example.com", "a=1"], input="raw")

        assert result.exit_code == 1
        assert "--ignore-stdin" in result.stderr
        assert httpx_mock.get_requests() == []

    def test_non_ascii_header(self, runner: CliRunner, httpx_mock: HTTPXMock):
        result = runner.invoke(cli, ["example.com/", "X-Name:José"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid request item 'X-Name:José'" in result.stderr
        assert httpx_mock.get_requests() == []

    def test_proxy_without_protocol(self, runner: CliRunner):
        result = runner.invoke(cli, ["--proxy", "http://proxy:3128", "example.com/"])

        assert result.exit_code == 1
        assert "Invalid proxy" in result.stderr

    def test_invalid_url(self, runner: CliRunner):
        result = runner.invoke(cli, ["ftp://example.com/file"])

        assert result.exit_code == 1
        assert "Invalid URL" in result.stderr

    def test_invalid_config(self, runner: CliRunner, config_file):
        config_file.write_text("{broken")

        result = runner.invoke(cli, ["example.com"])

        assert result.exit_code == 1
        assert "Invalid config file" in result.stderr

    @pytest.mark.parametrize(
        "args",
        [
            ["-c", "-o", "out.bin", "example.com"],
            ["-d", "-c", "example.com"],
            ["-j", "-f", "example.com"],
            ["-p", "Hx", "example.com"],
        ],
    )
    def test_usage_errors(self, runner: CliRunner, args):
        result = runner.invoke(cli, args)

        assert result.exit_code == 2


class TestDownload:
    def test_download_to_output(self, runner: CliRunner, httpx_mock: HTTPXMock, tmp_path):
        target = tmp_path / "file.bin"
        httpx_mock.add_response(
            url="https://example.com/file.bin",
            match_headers={"Accept-Encoding": "identity"},
            headers={"Content-Length": "11"},
            stream=IteratorStream([b"hello ", b"world"]),
        )

        result = runner.invoke(cli, ["-d", "-o", str(target), "example.com/file.bin"])

        assert result.exit_code == 0, result.output
        assert target.read_bytes() == b"hello world"
        assert result.stdout == ""
        assert "HTTP/1.1 200 OK" in result.stderr

    def test_resume(self, runner: CliRunner, httpx_mock: HTTPXMock, tmp_path):
        target = tmp_path / "file.bin"
        target.write_bytes(b"hello")
        httpx_mock.add_response(
            url="https://example.com/file.bin",
            status_code=206,
            match_headers={"Range": "bytes=5-"},
            headers={"Content-Range": "bytes 5-10/11", "Content-Length": "6"},
            stream=IteratorStream([b" world"]),
        )

        result = runner.invoke(
            cli, ["-d", "-c", "-o", str(target), "example.com/file.bin"]
        )

        assert result.exit_code == 0, result.output
        assert target.read_bytes() == b"hello world"

    def test_error_status_is_not_downloaded(
        self, runner: CliRunner, httpx_mock: HTTPXMock, tmp_path
    ):
        target = tmp_path / "file.bin"
        httpx_mock.add_response(url="https://example.com/file.bin", status_code=404)

        result = runner.invoke(cli, ["-d", "-o", str(target), "example.com/file.bin"])

        assert result.exit_code == 4
        assert not target.exists()
