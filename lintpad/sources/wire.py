"""Decoding of linter JSON responses into ``LintOutcome`` values.

Backends have answered in several envelope shapes over time::

    {"Ok": {"Lints": [...]}}        {"Lints": [...]}
    {"Err": {"Error": {...}}}       {"Error": {...}}

All of them are unwrapped here so the rest of the application only ever sees
``LintSuccess`` or ``LintFailure``.
"""

from __future__ import annotations

import json
from typing import Any

from lintpad.lint.model import (
    Annotation,
    Example,
    LintFailure,
    LintOutcome,
    LintSuccess,
    ParseError,
    Position,
    Severity,
    TextRange,
    TransformationError,
    TransportError,
    normalize_annotation,
)


def decode_lint_json(text: str) -> LintOutcome:
    raw = str(text or "").strip()
    if not raw:
        return LintFailure(TransportError("Linter returned an empty response."))
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        return LintFailure(TransportError(f"Linter returned invalid JSON: {exc}"))
    return decode_lint_response(payload)


def decode_lint_response(payload: Any) -> LintOutcome:
    body = _unwrap_envelope(payload)
    if not isinstance(body, dict):
        return LintFailure(TransportError("Linter response is not a JSON object."))

    if "Lints" in body:
        items = body.get("Lints")
        if not isinstance(items, list):
            return LintFailure(TransportError("Linter response 'Lints' is not a list."))
        annotations = [a for a in (_decode_annotation(item) for item in items) if a is not None]
        return LintSuccess(tuple(annotations))

    if "Error" in body:
        error = _decode_error(body.get("Error"))
        if error is not None:
            return LintFailure(error)
        return LintFailure(TransportError("Linter reported an unknown error kind."))

    return LintFailure(TransportError("Unrecognised linter response."))


def decode_examples(payload: Any) -> list[Example]:
    if not isinstance(payload, list):
        return []
    out: list[Example] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        kind = _kind_name(item.get("kind"))
        if not kind:
            continue
        out.append(
            Example(
                kind=kind,
                name=str(item.get("name") or ""),
                bad=str(item.get("bad") or ""),
                bad_explanation=str(item.get("bad_explanation") or ""),
                good=str(item.get("good") or ""),
                good_explanation=str(item.get("good_explanation") or ""),
            )
        )
    return out


def _unwrap_envelope(payload: Any) -> Any:
    if isinstance(payload, dict) and len(payload) == 1:
        for key in ("Ok", "Err"):
            if key in payload:
                return payload[key]
    return payload


def _decode_error(raw: Any) -> ParseError | TransformationError | TransportError | None:
    if not isinstance(raw, dict):
        return None
    parse = raw.get("parseerror")
    if isinstance(parse, dict):
        expected = parse.get("expected")
        if not isinstance(expected, list):
            expected = []
        return ParseError(
            position=_decode_point(parse.get("position")),
            expected=tuple(str(e) for e in expected),
        )
    transform = raw.get("transformationerror")
    if isinstance(transform, dict):
        return TransformationError(
            position=_decode_point(transform.get("position")),
            cause=str(transform.get("cause") or transform.get("message") or "Transformation failed."),
        )
    return None


def _decode_annotation(raw: Any) -> Annotation | None:
    if not isinstance(raw, dict):
        return None
    position = raw.get("position")
    if not isinstance(position, dict):
        return None
    start = _decode_point(position.get("start"))
    end = _decode_point(position.get("end"), fallback=start)
    message = str(raw.get("explanation") or raw.get("message") or "").strip() or "Lint issue"
    return normalize_annotation(
        Annotation(
            range=TextRange(start, end),
            severity=Severity.parse(raw.get("severity")),
            message=message,
            long_explanation=str(raw.get("explanation_long") or ""),
            suggestion=str(raw.get("solution") or ""),
            kind=_kind_name(raw.get("kind")),
        )
    )


def _decode_point(raw: Any, fallback: Position | None = None) -> Position:
    default = fallback or Position(1, 1)
    if not isinstance(raw, dict):
        return default
    # Span objects carry their start under "start".
    if "start" in raw and isinstance(raw.get("start"), dict):
        raw = raw["start"]
    try:
        line = int(raw.get("line") or default.line)
        col = int(raw.get("col") or raw.get("column") or default.column)
    except (TypeError, ValueError):
        return default
    return Position(max(1, line), max(1, col))


def _kind_name(raw: Any) -> str:
    return str(raw or "").strip().lower()
