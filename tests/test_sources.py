"""Tests for the HTTP and command annotation sources."""

import socket
import sys
import threading
import urllib.parse
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from lintpad.lint.model import LintFailure, LintSuccess, Position, Severity, TransportError
from lintpad.settings_schema import NormalizedLintConfig
from lintpad.sources.base import ExecutorAnnotationSource, normalize_source_text
from lintpad.sources.command_source import CommandAnnotationSource, split_command
from lintpad.sources.factory import create_annotation_source
from lintpad.sources.http_source import HttpAnnotationSource

RESPONSE = (
    '{"Ok": {"Lints": [{"position": {"start": {"line": 2, "col": 1}, "end": {"line": 2, "col": 4}},'
    ' "explanation": "Heading too deep", "severity": "warning", "kind": "MaxHeadingDepthViolation"}]}}'
)


class _LintHandler(BaseHTTPRequestHandler):
    received: list[str] = []
    status = 200

    def do_POST(self):
        length = int(self.headers.get("Content-Length", "0"))
        body = self.rfile.read(length).decode("utf-8")
        type(self).received.append(urllib.parse.parse_qs(body).get("source", [""])[0])
        self.send_response(type(self).status)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(RESPONSE.encode("utf-8"))

    def log_message(self, format, *args):
        return


@pytest.fixture
def lint_server():
    _LintHandler.received = []
    _LintHandler.status = 200
    server = ThreadingHTTPServer(("127.0.0.1", 0), _LintHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}/", _LintHandler
    server.shutdown()
    server.server_close()


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_line_breaks_are_normalized():
    assert normalize_source_text("a\r\nb\n\rc\rd\ne") == "a\nb\nc\nd\ne"
    assert normalize_source_text(None) == ""


def test_http_source_posts_document(lint_server):
    url, handler = lint_server
    source = HttpAnnotationSource(url, timeout_s=5)
    try:
        outcome = source.request("== Title ==\r\n==== Deep ====").result(timeout=10)
    finally:
        source.shutdown()
    assert handler.received == ["== Title ==\n==== Deep ===="]
    assert isinstance(outcome, LintSuccess)
    (annotation,) = outcome.annotations
    assert annotation.range.start == Position(2, 1)
    assert annotation.severity is Severity.WARNING
    assert annotation.kind == "maxheadingdepthviolation"


def test_http_error_status_is_transport_failure(lint_server):
    url, handler = lint_server
    handler.status = 500
    source = HttpAnnotationSource(url, timeout_s=5)
    try:
        outcome = source.request("text").result(timeout=10)
    finally:
        source.shutdown()
    assert isinstance(outcome, LintFailure)
    assert "HTTP 500" in outcome.error.detail


def test_unreachable_service_is_transport_failure():
    source = HttpAnnotationSource(f"http://127.0.0.1:{_free_port()}/", timeout_s=2)
    try:
        outcome = source.request("text").result(timeout=10)
    finally:
        source.shutdown()
    assert isinstance(outcome, LintFailure)
    assert isinstance(outcome.error, TransportError)


def test_missing_url_is_transport_failure():
    source = HttpAnnotationSource("")
    try:
        outcome = source.request("text").result(timeout=10)
    finally:
        source.shutdown()
    assert isinstance(outcome.error, TransportError)


def test_command_source_reads_stdout():
    script = f"import sys; sys.stdin.read(); sys.stdout.write({RESPONSE!r})"
    source = CommandAnnotationSource([sys.executable, "-c", script], timeout_s=20)
    try:
        outcome = source.request("text").result(timeout=30)
    finally:
        source.shutdown()
    assert isinstance(outcome, LintSuccess)
    assert outcome.annotations[0].message == "Heading too deep"


def test_command_source_receives_document_on_stdin():
    script = (
        "import json, sys; text = sys.stdin.read(); "
        "print(json.dumps({'Lints': [{'position': {'start': {'line': len(text.splitlines()), 'col': 1}},"
        " 'explanation': 'lines', 'severity': 'info'}]}))"
    )
    source = CommandAnnotationSource([sys.executable, "-c", script], timeout_s=20)
    try:
        outcome = source.request("a\r\nb\rc").result(timeout=30)
    finally:
        source.shutdown()
    assert outcome.annotations[0].range.start == Position(3, 1)


def test_command_without_output_is_transport_failure():
    source = CommandAnnotationSource([sys.executable, "-c", "import sys; sys.exit(3)"], timeout_s=20)
    try:
        outcome = source.request("text").result(timeout=30)
    finally:
        source.shutdown()
    assert isinstance(outcome.error, TransportError)
    assert "exit status 3" in outcome.error.detail


def test_missing_executable_is_transport_failure():
    source = CommandAnnotationSource("definitely-not-a-linter-binary --json")
    try:
        outcome = source.request("text").result(timeout=10)
    finally:
        source.shutdown()
    assert "not found" in outcome.error.detail


def test_split_command():
    assert split_command("mwlint --format 'json lines'") == ["mwlint", "--format", "json lines"]
    assert split_command(["a", "", "b"]) == ["a", "b"]


def test_request_after_shutdown_resolves_to_failure():
    source = CommandAnnotationSource([sys.executable, "-c", "print('{}')"])
    source.shutdown()
    outcome = source.request("text").result(timeout=5)
    assert isinstance(outcome.error, TransportError)


def test_exceptions_in_blocking_call_become_transport_failures():
    class Broken(ExecutorAnnotationSource):
        def lint_blocking(self, source_text):
            raise ValueError("bad state")

    source = Broken(max_workers=1)
    try:
        outcome = source.request("text").result(timeout=5)
    finally:
        source.shutdown()
    assert outcome == LintFailure(TransportError("ValueError: bad state"))


def test_factory_picks_backend():
    http = create_annotation_source(NormalizedLintConfig.from_mapping({"backend_url": "http://lint.local/"}))
    command = create_annotation_source(NormalizedLintConfig.from_mapping({"backend": "command", "command": "mwlint -"}))
    try:
        assert isinstance(http, HttpAnnotationSource)
        assert http.url == "http://lint.local/"
        assert isinstance(command, CommandAnnotationSource)
        assert command.argv == ["mwlint", "-"]
    finally:
        http.shutdown()
        command.shutdown()
