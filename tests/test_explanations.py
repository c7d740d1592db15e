"""Tests for tooltip HTML generation."""

from lintpad.lint.explanations import (
    annotation_html,
    annotation_plain_text,
    annotations_html,
    escape_html,
    examples_html,
)
from lintpad.lint.model import Example, Severity

from fakes import make_annotation


def _example(kind="illegalhtml"):
    return Example(
        kind=kind,
        name="html",
        bad="<b>bold</b>",
        bad_explanation="HTML is not allowed",
        good="'''bold'''",
        good_explanation="Use wiki markup",
    )


def test_escape_html():
    assert escape_html("<a href=\"x\">&</a>") == "&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;"
    assert escape_html(None) == ""


def test_message_text_is_escaped():
    annotation = make_annotation(1, message="<script>alert(1)</script>", suggestion="use &amp;")
    html = annotation_html(annotation)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "use &amp;amp;" in html


def test_no_example_block_without_examples():
    annotation = make_annotation(1, kind="illegalhtml")
    assert "Examples:" not in annotation_html(annotation)
    assert "Examples:" not in annotation_html(annotation, lambda kind: [])
    assert examples_html([]) == ""


def test_example_block_is_escaped():
    annotation = make_annotation(1, kind="illegalhtml")
    html = annotation_html(annotation, lambda kind: [_example()])
    assert "Examples:" in html
    assert "&lt;b&gt;bold&lt;/b&gt;" in html
    assert "Use wiki markup" in html


def test_failing_lookup_is_ignored():
    def lookup(kind):
        raise KeyError(kind)

    html = annotation_html(make_annotation(1, kind="x"), lookup)
    assert "Examples:" not in html


def test_severity_class_and_optional_parts():
    annotation = make_annotation(1, severity=Severity.ERROR, message="m", long_explanation="long text")
    html = annotation_html(annotation)
    assert "explanation-error" in html
    assert "long text" in html
    assert "solution" not in html


def test_annotations_are_separated():
    html = annotations_html([make_annotation(1, message="a"), make_annotation(1, message="b")])
    assert html.count("<hr>") == 1


def test_plain_text():
    assert annotation_plain_text(make_annotation(1, message="m")) == "m"
    assert annotation_plain_text(make_annotation(1, message="m", suggestion="s")) == "m\n=> try: s"
