"""Tests for per-line grouping and severity summaries."""

from lintpad.lint.grouping import format_summary, group, max_severity, severity_counts, sort_for_display
from lintpad.lint.model import Severity

from fakes import make_annotation


def test_groups_are_sorted_by_line():
    annotations = [
        make_annotation(7, message="seven"),
        make_annotation(2, message="two"),
        make_annotation(7, 4, message="seven again"),
    ]
    groups = group(annotations)
    assert [g.line for g in groups] == [2, 7]
    assert len(groups[1].annotations) == 2


def test_most_severe_first_within_a_line():
    annotations = [
        make_annotation(3, severity=Severity.INFO, message="i"),
        make_annotation(3, severity=Severity.ERROR, message="e"),
        make_annotation(3, severity=Severity.WARNING, message="w"),
    ]
    (line_group,) = group(annotations)
    assert [a.message for a in line_group.annotations] == ["e", "w", "i"]
    assert line_group.max_severity is Severity.ERROR


def test_equal_severities_keep_source_order():
    annotations = [make_annotation(1, severity=Severity.WARNING, message=str(n)) for n in range(5)]
    assert [a.message for a in sort_for_display(annotations)] == ["0", "1", "2", "3", "4"]
    (line_group,) = group(annotations)
    assert [a.message for a in line_group.annotations] == ["0", "1", "2", "3", "4"]


def test_every_annotation_is_kept():
    annotations = [make_annotation(n % 3 + 1, message=str(n)) for n in range(10)]
    groups = group(annotations)
    assert sum(len(g.annotations) for g in groups) == 10


def test_empty_input():
    assert group([]) == []
    assert max_severity([]) is None


def test_max_severity():
    assert max_severity([Severity.INFO, Severity.WARNING]) is Severity.WARNING
    assert max_severity([Severity.INFO]) is Severity.INFO


def test_severity_counts_and_summary():
    annotations = [
        make_annotation(1, severity=Severity.ERROR),
        make_annotation(1, severity=Severity.ERROR),
        make_annotation(2, severity=Severity.ERROR),
        make_annotation(5, severity=Severity.WARNING),
        make_annotation(6, severity=Severity.INFO),
    ]
    counts = severity_counts(group(annotations))
    assert counts == {Severity.ERROR: 3, Severity.WARNING: 1, Severity.INFO: 1}
    assert format_summary(counts) == "3 errors, 1 warning, 1 info"


def test_summary_without_problems():
    assert format_summary({}) == "No problems"
    assert format_summary({Severity.ERROR: 0}) == "No problems"


def test_summary_plural_warning():
    assert format_summary({Severity.WARNING: 2}) == "2 warnings"
