from __future__ import annotations

from PySide6.QtCore import QPoint, QPropertyAnimation, Qt
from PySide6.QtWidgets import QLabel, QWidget

_TOOLTIP_QSS = """
QLabel#lintTooltip {
    background-color: #2f2f2f;
    color: #e8e8e8;
    border: 1px solid #4a4a4a;
    padding: 6px;
}
"""


class LintTooltip(QLabel):
    """Rich-text tooltip window that follows the pointer and fades out."""

    FADE_MS = 150

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent, Qt.ToolTip | Qt.FramelessWindowHint)
        self.setObjectName("lintTooltip")
        self.setTextFormat(Qt.RichText)
        self.setWordWrap(True)
        self.setMaximumWidth(520)
        self.setAttribute(Qt.WA_ShowWithoutActivating, True)
        self.setStyleSheet(_TOOLTIP_QSS)
        self._fade = QPropertyAnimation(self, b"windowOpacity", self)
        self._fade.setDuration(self.FADE_MS)
        self.hide()

    def fade_ms(self) -> int:
        return int(self._fade.duration())

    def set_fade_ms(self, ms: int) -> None:
        self._fade.setDuration(max(0, int(ms)))

    def show_tooltip(self, html: str, pos: QPoint | None) -> None:
        self._fade.stop()
        self.setWindowOpacity(1.0)
        self.setText(str(html or ""))
        self.adjustSize()
        if isinstance(pos, QPoint) and not pos.isNull():
            self.move(pos)
        self.show()
        self.raise_()

    def move_tooltip(self, pos: QPoint | None) -> None:
        if isinstance(pos, QPoint) and not pos.isNull() and self.isVisible():
            self.move(pos)

    def begin_fade(self) -> None:
        if not self.isVisible():
            return
        self._fade.stop()
        self._fade.setStartValue(float(self.windowOpacity()))
        self._fade.setEndValue(0.0)
        self._fade.start()

    def hide_tooltip(self) -> None:
        self._fade.stop()
        self.hide()
        self.setWindowOpacity(1.0)
