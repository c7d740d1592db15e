from __future__ import annotations

import socket
import ssl
import urllib.error
import urllib.parse
import urllib.request

from lintpad.lint.model import LintFailure, LintOutcome, TransportError
from lintpad.sources.base import ExecutorAnnotationSource
from lintpad.sources.wire import decode_lint_json


class HttpAnnotationSource(ExecutorAnnotationSource):
    """Posts the document as ``source=<text>`` to a lint web service."""

    def __init__(self, url: str, *, timeout_s: float = 20.0, max_workers: int = 2) -> None:
        super().__init__(max_workers=max_workers, thread_name_prefix="lintpad-http")
        self._url = str(url or "").strip()
        self._timeout_s = max(0.5, float(timeout_s))

    @property
    def url(self) -> str:
        return self._url

    def lint_blocking(self, source_text: str) -> LintOutcome:
        if not self._url:
            return LintFailure(TransportError("No lint service URL configured."))

        body = urllib.parse.urlencode({"source": source_text}).encode("utf-8")
        req = urllib.request.Request(
            url=self._url,
            method="POST",
            data=body,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/x-www-form-urlencoded",
                "User-Agent": "lintpad/1.0",
            },
        )
        try:
            with urllib.request.urlopen(req, timeout=self._timeout_s) as resp:
                text = resp.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as exc:
            return LintFailure(TransportError(f"Lint service answered HTTP {int(exc.code)}."))
        except urllib.error.URLError as exc:
            reason = getattr(exc, "reason", None)
            if isinstance(reason, ssl.SSLError):
                message = "TLS handshake with lint service failed."
            elif isinstance(reason, socket.timeout):
                message = "Lint service timed out."
            elif isinstance(reason, ConnectionRefusedError):
                message = "Connection refused by lint service."
            else:
                message = f"Could not reach lint service at {self._url}."
            return LintFailure(TransportError(message))
        except socket.timeout:
            return LintFailure(TransportError("Lint service timed out."))
        return decode_lint_json(text)
