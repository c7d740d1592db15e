from __future__ import annotations

import shlex
import subprocess
from typing import Sequence

from lintpad.lint.model import LintFailure, LintOutcome, TransportError
from lintpad.sources.base import ExecutorAnnotationSource
from lintpad.sources.wire import decode_lint_json


def split_command(command: str | Sequence[str]) -> list[str]:
    if isinstance(command, str):
        return shlex.split(command)
    return [str(part) for part in command if str(part)]


class CommandAnnotationSource(ExecutorAnnotationSource):
    """Feeds the document to a linter executable on stdin and reads JSON from stdout."""

    def __init__(self, command: str | Sequence[str], *, timeout_s: float = 20.0, max_workers: int = 2) -> None:
        super().__init__(max_workers=max_workers, thread_name_prefix="lintpad-cmd")
        self._argv = split_command(command)
        self._timeout_s = max(0.5, float(timeout_s))

    @property
    def argv(self) -> list[str]:
        return list(self._argv)

    def lint_blocking(self, source_text: str) -> LintOutcome:
        if not self._argv:
            return LintFailure(TransportError("No lint command configured."))
        try:
            proc = subprocess.run(
                self._argv,
                input=source_text,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self._timeout_s,
            )
        except FileNotFoundError:
            return LintFailure(TransportError(f"Lint command not found: {self._argv[0]}"))
        except subprocess.TimeoutExpired:
            return LintFailure(TransportError(f"Lint command timed out after {self._timeout_s:g}s."))

        stdout = proc.stdout or ""
        if not stdout.strip():
            stderr = (proc.stderr or "").strip().splitlines()
            detail = stderr[-1] if stderr else f"exit status {proc.returncode}"
            return LintFailure(TransportError(f"Lint command produced no output ({detail})."))
        return decode_lint_json(stdout)
