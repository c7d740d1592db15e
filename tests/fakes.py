"""Test doubles for the lint surface, tooltip view and annotation source."""

from __future__ import annotations

import concurrent.futures

from lintpad.lint.model import Annotation, LintSuccess, Position, Severity, TextRange
from lintpad.sources.base import AnnotationSource


def make_annotation(
    line: int,
    col: int = 1,
    *,
    end_line: int | None = None,
    end_col: int | None = None,
    severity: Severity = Severity.WARNING,
    message: str = "issue",
    suggestion: str = "",
    long_explanation: str = "",
    kind: str = "",
) -> Annotation:
    start = Position(line, col)
    end = Position(end_line if end_line is not None else line, end_col if end_col is not None else col + 1)
    return Annotation(
        range=TextRange(start, end),
        severity=severity,
        message=message,
        long_explanation=long_explanation,
        suggestion=suggestion,
        kind=kind,
    )


class FakeSurface:
    """Records every call the renderer makes."""

    def __init__(self):
        self.marks: list = []
        self.gutter: dict[int, tuple[Severity, str]] = {}
        self.calls: list[tuple] = []

    def add_lint_mark(self, mark):
        self.calls.append(("add", mark))
        self.marks.append(mark)

    def remove_lint_mark(self, mark):
        self.calls.append(("remove", mark))
        self.marks.remove(mark)

    def set_gutter_marker(self, line, severity, html):
        self.calls.append(("gutter", line, severity))
        self.gutter[line] = (severity, html)

    def clear_gutter_markers(self):
        self.calls.append(("clear_gutter",))
        self.gutter.clear()


class FakeTooltipView:
    def __init__(self):
        self.events: list[tuple] = []
        self.visible = False
        self.html = ""

    def show_tooltip(self, html, pos):
        self.events.append(("show", html))
        self.visible = True
        self.html = html

    def move_tooltip(self, pos):
        self.events.append(("move", pos))

    def begin_fade(self):
        self.events.append(("fade",))

    def hide_tooltip(self):
        self.events.append(("hide",))
        self.visible = False

    def names(self) -> list[str]:
        return [e[0] for e in self.events]


class ManualSource(AnnotationSource):
    """Hands out futures that the test completes explicitly, in any order."""

    def __init__(self):
        self.requests: list[tuple[str, concurrent.futures.Future]] = []
        self.shut_down = False

    def request(self, source_text):
        future: concurrent.futures.Future = concurrent.futures.Future()
        self.requests.append((source_text, future))
        return future

    def shutdown(self):
        self.shut_down = True

    def texts(self) -> list[str]:
        return [text for text, _ in self.requests]

    def resolve(self, index: int, outcome) -> None:
        self.requests[index][1].set_result(outcome)

    def succeed(self, index: int, *annotations: Annotation) -> None:
        self.resolve(index, LintSuccess(tuple(annotations)))

    def fail(self, index: int, exc: BaseException) -> None:
        self.requests[index][1].set_exception(exc)
