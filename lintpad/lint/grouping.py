from __future__ import annotations

from typing import Iterable, Mapping

from lintpad.lint.model import SEVERITIES, Annotation, LineGroup, Severity


def sort_for_display(annotations: Iterable[Annotation]) -> list[Annotation]:
    # sorted() is stable, so equal severities keep their source order.
    return sorted(annotations, key=lambda a: -a.severity.rank)


def max_severity(severities: Iterable[Severity]) -> Severity | None:
    best: Severity | None = None
    for sev in severities:
        if best is None or sev.rank > best.rank:
            best = sev
    return best


def group(annotations: Iterable[Annotation]) -> list[LineGroup]:
    """Partition annotations by start line, most severe first within each line."""
    by_line: dict[int, LineGroup] = {}
    for annotation in sort_for_display(annotations):
        line = annotation.line
        entry = by_line.get(line)
        if entry is None:
            entry = LineGroup(line=line, max_severity=annotation.severity)
            by_line[line] = entry
        entry.annotations.append(annotation)
        if annotation.severity.rank > entry.max_severity.rank:
            entry.max_severity = annotation.severity
    return [by_line[line] for line in sorted(by_line)]


def severity_counts(line_groups: Iterable[LineGroup]) -> dict[Severity, int]:
    counts: dict[Severity, int] = {}
    for entry in line_groups:
        for annotation in entry.annotations:
            counts[annotation.severity] = counts.get(annotation.severity, 0) + 1
    return counts


def format_summary(counts: Mapping[Severity, int]) -> str:
    parts: list[str] = []
    for sev in SEVERITIES:
        n = int(counts.get(sev, 0))
        if n <= 0:
            continue
        noun = sev.value if n == 1 or sev is Severity.INFO else f"{sev.value}s"
        parts.append(f"{n} {noun}")
    if not parts:
        return "No problems"
    return ", ".join(parts)
