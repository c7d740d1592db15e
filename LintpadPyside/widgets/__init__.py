"""Reusable PySide widgets for lint-aware editing."""

from .code_editor import CodeEditor
from .lint_tooltip import LintTooltip

__all__ = ["CodeEditor", "LintTooltip"]
