from .coordinator import RequestCoordinator, annotation_for_failure
from .debounce import DebounceScheduler
from .grouping import format_summary, group, severity_counts
from .model import Annotation, LineGroup, Position, Severity, TextRange
from .rendering import LintMark, MarkRenderer
from .session import EditorLintSession
from .tooltip import HoverState, HoverTooltipController

__all__ = [
    "Annotation",
    "DebounceScheduler",
    "EditorLintSession",
    "HoverState",
    "HoverTooltipController",
    "LineGroup",
    "LintMark",
    "MarkRenderer",
    "Position",
    "RequestCoordinator",
    "Severity",
    "TextRange",
    "annotation_for_failure",
    "format_summary",
    "group",
    "severity_counts",
]
