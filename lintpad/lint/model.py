"""Value types shared by the lint coordinator, renderer and sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]

    @classmethod
    def parse(cls, value: object, default: "Severity | None" = None) -> "Severity":
        text = str(value.value if isinstance(value, Severity) else value or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        return default if default is not None else cls.WARNING


SEVERITY_RANK: dict[Severity, int] = {
    Severity.ERROR: 3,
    Severity.WARNING: 2,
    Severity.INFO: 1,
}

# Display order, most severe first.
SEVERITIES: tuple[Severity, ...] = tuple(sorted(SEVERITY_RANK, key=SEVERITY_RANK.__getitem__, reverse=True))


@dataclass(frozen=True, slots=True, order=True)
class Position:
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class TextRange:
    start: Position
    end: Position

    @classmethod
    def point(cls, position: Position) -> "TextRange":
        return cls(start=position, end=position)

    @property
    def is_point(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True, slots=True)
class MarkSpan:
    """0-based, end-exclusive span in editor coordinates."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int


@dataclass(frozen=True, slots=True)
class Annotation:
    range: TextRange
    severity: Severity
    message: str
    long_explanation: str = ""
    suggestion: str = ""
    kind: str = ""

    @property
    def line(self) -> int:
        return self.range.start.line


@dataclass(frozen=True, slots=True)
class Example:
    kind: str
    bad: str
    bad_explanation: str
    good: str
    good_explanation: str
    name: str = ""


@dataclass(frozen=True, slots=True)
class ParseError:
    position: Position
    expected: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TransformationError:
    position: Position
    cause: str


@dataclass(frozen=True, slots=True)
class TransportError:
    detail: str = ""


LintError = Union[ParseError, TransformationError, TransportError]


@dataclass(frozen=True, slots=True)
class LintSuccess:
    annotations: tuple[Annotation, ...] = ()


@dataclass(frozen=True, slots=True)
class LintFailure:
    error: LintError


LintOutcome = Union[LintSuccess, LintFailure]


@dataclass(slots=True)
class LineGroup:
    line: int
    annotations: list[Annotation] = field(default_factory=list)
    max_severity: Severity = Severity.INFO


def normalize_annotation(annotation: Annotation) -> Annotation:
    """Clamp positions to 1-based values and collapse inverted ranges to a point at ``start``."""
    start = Position(max(1, int(annotation.range.start.line)), max(1, int(annotation.range.start.column)))
    end = Position(max(1, int(annotation.range.end.line)), max(1, int(annotation.range.end.column)))
    if end < start:
        end = start
    if start == annotation.range.start and end == annotation.range.end:
        return annotation
    return Annotation(
        range=TextRange(start, end),
        severity=annotation.severity,
        message=annotation.message,
        long_explanation=annotation.long_explanation,
        suggestion=annotation.suggestion,
        kind=annotation.kind,
    )


def to_mark_span(text_range: TextRange) -> MarkSpan:
    """Convert a 1-based range into a 0-based half-open span of non-zero width."""
    start_line = max(0, text_range.start.line - 1)
    start_col = max(0, text_range.start.column - 1)
    end_line = max(0, text_range.end.line - 1)
    end_col = max(0, text_range.end.column - 1)
    if (end_line, end_col) <= (start_line, start_col):
        end_line = start_line
        end_col = start_col + 1
    return MarkSpan(start_line, start_col, end_line, end_col)
