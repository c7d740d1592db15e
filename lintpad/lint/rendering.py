from __future__ import annotations

from typing import Callable, Iterable, Protocol

from lintpad.lint.explanations import ExampleLookup, annotation_html, annotations_html
from lintpad.lint.grouping import format_summary, severity_counts
from lintpad.lint.model import Annotation, LineGroup, MarkSpan, Severity, to_mark_span


class LintMark:
    """Handle for one rendered mark.

    The renderer owns every mark it creates. ``revoke()`` runs when the mark is
    cleared, so listeners such as an open tooltip learn about it synchronously.
    """

    __slots__ = ("annotation", "span", "html", "_alive", "_revoke_listeners")

    def __init__(self, annotation: Annotation, span: MarkSpan, html: str) -> None:
        self.annotation = annotation
        self.span = span
        self.html = html
        self._alive = True
        self._revoke_listeners: list[Callable[["LintMark"], None]] = []

    @property
    def severity(self) -> Severity:
        return self.annotation.severity

    @property
    def alive(self) -> bool:
        return self._alive

    def add_revoke_listener(self, callback: Callable[["LintMark"], None]) -> None:
        if not self._alive:
            callback(self)
            return
        self._revoke_listeners.append(callback)

    def remove_revoke_listener(self, callback: Callable[["LintMark"], None]) -> None:
        try:
            self._revoke_listeners.remove(callback)
        except ValueError:
            pass

    def revoke(self) -> None:
        if not self._alive:
            return
        self._alive = False
        listeners, self._revoke_listeners = self._revoke_listeners, []
        for callback in listeners:
            callback(self)

    def __repr__(self) -> str:
        state = "alive" if self._alive else "revoked"
        return f"<LintMark {self.severity.value} {self.span} {state}>"


class LintSurface(Protocol):
    def add_lint_mark(self, mark: LintMark) -> None: ...

    def remove_lint_mark(self, mark: LintMark) -> None: ...

    def set_gutter_marker(self, line: int, severity: Severity, html: str) -> None: ...

    def clear_gutter_markers(self) -> None: ...


SummaryCallback = Callable[[dict, str], None]


class MarkRenderer:
    """Keeps the marks on a lint surface equal to the last rendered line groups."""

    def __init__(
        self,
        surface: LintSurface,
        *,
        gutter_enabled: bool = True,
        example_lookup: ExampleLookup | None = None,
        on_summary: SummaryCallback | None = None,
    ) -> None:
        self._surface = surface
        self._gutter_enabled = bool(gutter_enabled)
        self._example_lookup = example_lookup
        self._on_summary = on_summary
        self._live_marks: list[LintMark] = []
        self._gutter_lines: set[int] = set()

    @property
    def gutter_enabled(self) -> bool:
        return self._gutter_enabled

    @property
    def live_marks(self) -> tuple[LintMark, ...]:
        return tuple(self._live_marks)

    def clear(self) -> None:
        marks, self._live_marks = self._live_marks, []
        for mark in marks:
            self._surface.remove_lint_mark(mark)
            mark.revoke()
        if self._gutter_lines:
            self._gutter_lines.clear()
            self._surface.clear_gutter_markers()

    def render(self, line_groups: Iterable[LineGroup]) -> None:
        groups = list(line_groups)
        self.clear()

        created: list[LintMark] = []
        for entry in groups:
            for annotation in entry.annotations:
                mark = LintMark(
                    annotation=annotation,
                    span=to_mark_span(annotation.range),
                    html=annotation_html(annotation, self._example_lookup),
                )
                self._surface.add_lint_mark(mark)
                created.append(mark)
            if self._gutter_enabled and entry.annotations:
                line0 = max(0, entry.line - 1)
                self._surface.set_gutter_marker(
                    line0,
                    entry.max_severity,
                    annotations_html(entry.annotations, self._example_lookup),
                )
                self._gutter_lines.add(line0)
        self._live_marks = created

        if self._on_summary is not None:
            counts = severity_counts(groups)
            self._on_summary(counts, format_summary(counts))
