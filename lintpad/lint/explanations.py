from __future__ import annotations

import html
from typing import Callable, Iterable, Sequence

from lintpad.lint.model import Annotation, Example

ExampleLookup = Callable[[str], Sequence[Example]]


def escape_html(text: object) -> str:
    return html.escape(str(text or ""), quote=True)


def _lookup_examples(lookup: ExampleLookup | None, kind: str) -> list[Example]:
    if lookup is None or not kind:
        return []
    try:
        return list(lookup(kind) or [])
    except Exception:
        return []


def examples_html(examples: Iterable[Example]) -> str:
    blocks: list[str] = []
    for ex in examples:
        blocks.append(
            "<div class='example'>"
            "<div class='example-bad-tag'><b>bad:</b></div>"
            f"<pre class='example-bad'>{escape_html(ex.bad)}</pre>"
            f"<div class='example-bad-expl'>{escape_html(ex.bad_explanation)}</div>"
            "<div class='example-good-tag'><b>good:</b></div>"
            f"<pre class='example-good'>{escape_html(ex.good)}</pre>"
            f"<div class='example-good-expl'>{escape_html(ex.good_explanation)}</div>"
            "</div>"
        )
    if not blocks:
        return ""
    return (
        "<hr class='example-sep'>"
        "<div class='example-container'><div class='example-header'>Examples:</div>"
        + "".join(blocks)
        + "</div>"
    )


def annotation_html(annotation: Annotation, lookup: ExampleLookup | None = None) -> str:
    """Tooltip body for one annotation. The examples block is omitted when there are none."""
    parts = [
        f"<div class='explanation explanation-{annotation.severity.value}'>"
        f"<b>{escape_html(annotation.message)}</b></div>"
    ]
    if annotation.suggestion:
        parts.append(f"<div class='solution'>&#8618; {escape_html(annotation.suggestion)}</div>")
    if annotation.long_explanation:
        parts.append(f"<div class='explanation_long'>{escape_html(annotation.long_explanation)}</div>")
    parts.append(examples_html(_lookup_examples(lookup, annotation.kind)))
    return "".join(parts)


def annotations_html(annotations: Iterable[Annotation], lookup: ExampleLookup | None = None) -> str:
    return "<hr>".join(annotation_html(a, lookup) for a in annotations)


def annotation_plain_text(annotation: Annotation) -> str:
    text = annotation.message
    if annotation.suggestion:
        text += f"\n=> try: {annotation.suggestion}"
    return text
