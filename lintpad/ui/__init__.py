from .main_window import LintEditorWindow
from .problems_panel import ProblemsPanel

__all__ = ["LintEditorWindow", "ProblemsPanel"]
