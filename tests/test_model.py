"""Tests for lint value types and position normalization."""

from lintpad.lint.model import (
    SEVERITIES,
    MarkSpan,
    Position,
    Severity,
    TextRange,
    normalize_annotation,
    to_mark_span,
)

from fakes import make_annotation


def test_severity_rank_order():
    assert Severity.ERROR.rank > Severity.WARNING.rank > Severity.INFO.rank
    assert SEVERITIES == (Severity.ERROR, Severity.WARNING, Severity.INFO)


def test_severity_parse_is_case_insensitive():
    assert Severity.parse("Error") is Severity.ERROR
    assert Severity.parse(" info ") is Severity.INFO
    assert Severity.parse(Severity.WARNING) is Severity.WARNING


def test_unknown_severity_defaults_to_warning():
    assert Severity.parse("fatal") is Severity.WARNING
    assert Severity.parse(None) is Severity.WARNING
    assert Severity.parse("fatal", default=Severity.INFO) is Severity.INFO


def test_normalize_clamps_to_one_based():
    annotation = make_annotation(0, 0, end_line=0, end_col=-3)
    normalized = normalize_annotation(annotation)
    assert normalized.range.start == Position(1, 1)
    assert normalized.range.end == Position(1, 1)


def test_normalize_collapses_inverted_range_to_start():
    annotation = make_annotation(4, 10, end_line=4, end_col=2)
    normalized = normalize_annotation(annotation)
    assert normalized.range == TextRange.point(Position(4, 10))
    assert normalized.message == annotation.message


def test_normalize_keeps_valid_annotation_identity():
    annotation = make_annotation(2, 3, end_line=2, end_col=8)
    assert normalize_annotation(annotation) is annotation


def test_mark_span_is_zero_based_and_end_exclusive():
    span = to_mark_span(TextRange(Position(2, 3), Position(2, 8)))
    assert span == MarkSpan(1, 2, 1, 7)


def test_point_range_gets_one_column_of_width():
    span = to_mark_span(TextRange.point(Position(3, 5)))
    assert span == MarkSpan(2, 4, 2, 5)


def test_multi_line_span():
    span = to_mark_span(TextRange(Position(1, 4), Position(3, 1)))
    assert (span.start_line, span.start_column, span.end_line, span.end_column) == (0, 3, 2, 0)
