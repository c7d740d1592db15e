"""Live lint annotations for a PySide6 text editor."""

__version__ = "0.3.0"
