from __future__ import annotations

import concurrent.futures
import re
from abc import ABC, abstractmethod

from lintpad.lint.model import LintFailure, LintOutcome, TransportError

_LINE_BREAK_RE = re.compile(r"\r\n|\n\r|\r")


def normalize_source_text(text: str) -> str:
    return _LINE_BREAK_RE.sub("\n", str(text or ""))


class AnnotationSource(ABC):
    """Produces lint results for a document snapshot without blocking the caller."""

    @abstractmethod
    def request(self, source_text: str) -> concurrent.futures.Future:
        """Return a future resolving to a ``LintOutcome``."""
        raise NotImplementedError

    def shutdown(self) -> None:
        return None


class ExecutorAnnotationSource(AnnotationSource):
    """Runs a blocking lint call on a small worker pool."""

    def __init__(self, *, max_workers: int = 2, thread_name_prefix: str = "lintpad-source") -> None:
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)),
            thread_name_prefix=thread_name_prefix,
        )

    def request(self, source_text: str) -> concurrent.futures.Future:
        text = normalize_source_text(source_text)
        try:
            return self._executor.submit(self._run_guarded, text)
        except RuntimeError as exc:
            # Executor already shut down.
            future: concurrent.futures.Future = concurrent.futures.Future()
            future.set_result(LintFailure(TransportError(str(exc))))
            return future

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _run_guarded(self, source_text: str) -> LintOutcome:
        try:
            return self.lint_blocking(source_text)
        except Exception as exc:
            return LintFailure(TransportError(f"{type(exc).__name__}: {exc}"))

    @abstractmethod
    def lint_blocking(self, source_text: str) -> LintOutcome:
        raise NotImplementedError
