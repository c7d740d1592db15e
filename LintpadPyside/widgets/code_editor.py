from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QEvent, QPoint, QPointF, QRect, QSize, Qt, QTimer, Signal
from PySide6.QtGui import QColor, QFont, QPainter, QPainterPath, QPen, QTextCursor, QTextFormat
from PySide6.QtWidgets import QPlainTextEdit, QTextEdit, QToolTip, QWidget

from LintpadPyside.widgets.lint_tooltip import LintTooltip

_LINT_VISUAL_DEFAULTS = {
    "error_color": "#E35D6A",
    "warning_color": "#D6A54A",
    "info_color": "#6AA1FF",
    "squiggle_thickness": 2,
}
_SEVERITY_RANK = {"error": 3, "warning": 2, "info": 1}
_TOOLTIP_OFFSET = QPoint(16, 14)


def _severity_name(severity: object) -> str:
    value = getattr(severity, "value", severity)
    return str(value or "warning").lower()


class LineNumberArea(QWidget):
    def __init__(self, editor: "CodeEditor"):
        super().__init__(editor)
        self.codeEditor = editor
        self.setMouseTracking(True)

    def sizeHint(self):
        return QSize(self.codeEditor.lineNumberAreaWidth(), 0)

    def paintEvent(self, event):
        self.codeEditor.lineNumberAreaPaintEvent(event)

    def mouseMoveEvent(self, event):
        self.codeEditor.lineNumberAreaMouseMoveEvent(event)

    def leaveEvent(self, event):
        QToolTip.hideText()
        super().leaveEvent(event)


class CodeEditor(QPlainTextEdit):
    """Plain text editor that acts as a lint surface.

    Marks are opaque handles exposing ``span`` (0-based, end-exclusive),
    ``severity`` and ``html``. Gutter markers are kept per 0-based line.
    """

    lintHoverChanged = Signal(object, object)  # mark or None, global QPoint

    def __init__(self, parent=None):
        super().__init__(parent)
        self._lint_marks: list[object] = []
        self._gutter_markers: dict[int, tuple[str, str]] = {}
        self._lint_visual_cfg = dict(_LINT_VISUAL_DEFAULTS)
        self._lint_provider: Callable[[], list[dict]] | None = None
        self._gutter_icon_width = 14
        self._hovered_mark: object | None = None
        self._editor_background_color = QColor("#252526")

        self.lint_tooltip = LintTooltip(self)

        self._lint_repaint_timer = QTimer(self)
        self._lint_repaint_timer.setSingleShot(True)
        self._lint_repaint_timer.setInterval(0)
        self._lint_repaint_timer.timeout.connect(self._refresh_lint_visuals)

        self.lineNumberArea = LineNumberArea(self)
        self.blockCountChanged.connect(self.updateLineNumberAreaWidth)
        self.updateRequest.connect(self.updateLineNumberArea)
        self.cursorPositionChanged.connect(self.highlightCurrentLine)
        self.viewport().setMouseTracking(True)
        self.viewport().installEventFilter(self)

        self.setFont(QFont("Monospace", 11))
        self.setStyleSheet("QPlainTextEdit { background: #252526; color: #d4d4d4; }")
        self.updateLineNumberAreaWidth(0)
        self.highlightCurrentLine()

    # ---------- Lint surface ----------

    def add_lint_mark(self, mark: object) -> None:
        self._lint_marks.append(mark)
        self._schedule_lint_refresh()

    def remove_lint_mark(self, mark: object) -> None:
        for idx, existing in enumerate(self._lint_marks):
            if existing is mark:
                del self._lint_marks[idx]
                break
        if self._hovered_mark is mark:
            self._hovered_mark = None
        self._schedule_lint_refresh()

    def set_gutter_marker(self, line: int, severity: object, html: str) -> None:
        self._gutter_markers[max(0, int(line))] = (_severity_name(severity), str(html or ""))
        self.lineNumberArea.update()

    def clear_gutter_markers(self) -> None:
        if not self._gutter_markers:
            return
        self._gutter_markers.clear()
        self.lineNumberArea.update()

    def lint_marks(self) -> list[object]:
        return list(self._lint_marks)

    def gutter_markers(self) -> dict[int, tuple[str, str]]:
        return dict(self._gutter_markers)

    def set_lint_provider(self, provider: Callable[[], list[dict]] | None) -> None:
        self._lint_provider = provider

    def lint_provider_marks(self) -> list[dict]:
        if self._lint_provider is None:
            return []
        return list(self._lint_provider() or [])

    def lint_mark_at(self, pos: QPoint) -> object | None:
        cursor = self.cursorForPosition(pos)
        line = int(cursor.blockNumber())
        col = int(cursor.positionInBlock())
        # cursorForPosition snaps to the nearest character boundary; reject
        # points that are clearly past the end of the line text.
        rect = self.cursorRect(cursor)
        if pos.x() > rect.right() + self.fontMetrics().horizontalAdvance(" ") * 2:
            line_end = len(cursor.block().text())
            if col >= line_end:
                return None
        best = None
        for mark in self._lint_marks:
            span = getattr(mark, "span", None)
            if span is None or not self._span_contains(span, line, col):
                continue
            if best is None or _SEVERITY_RANK.get(_severity_name(mark.severity), 0) > _SEVERITY_RANK.get(
                _severity_name(best.severity), 0
            ):
                best = mark
        return best

    @staticmethod
    def _span_contains(span, line: int, col: int) -> bool:
        start = (int(span.start_line), int(span.start_column))
        end = (int(span.end_line), int(span.end_column))
        here = (line, col)
        if start <= here < end:
            return True
        # Let the pointer catch a one-column mark from either side of the character.
        return end == (start[0], start[1] + 1) and here == end

    def update_lint_visual_settings(self, lint_visual_cfg: dict):
        cfg = lint_visual_cfg if isinstance(lint_visual_cfg, dict) else {}
        merged = dict(_LINT_VISUAL_DEFAULTS)
        for key in merged:
            if key in cfg:
                merged[key] = cfg[key]
        for key in ("error_color", "warning_color", "info_color"):
            if not QColor(str(merged[key])).isValid():
                merged[key] = _LINT_VISUAL_DEFAULTS[key]
        try:
            merged["squiggle_thickness"] = max(1, min(6, int(merged["squiggle_thickness"])))
        except Exception:
            merged["squiggle_thickness"] = _LINT_VISUAL_DEFAULTS["squiggle_thickness"]
        if merged == self._lint_visual_cfg:
            return
        self._lint_visual_cfg = merged
        self._refresh_lint_visuals()

    # ---------- Events ----------

    def eventFilter(self, watched, event):
        if watched is self.viewport():
            et = event.type()
            if et == QEvent.MouseMove:
                pos = event.position().toPoint() if hasattr(event, "position") else event.pos()
                mark = self.lint_mark_at(pos)
                self._hovered_mark = mark
                self.lintHoverChanged.emit(mark, self.viewport().mapToGlobal(pos + _TOOLTIP_OFFSET))
            elif et in (QEvent.Leave, QEvent.Hide):
                self._hovered_mark = None
                self.lintHoverChanged.emit(None, QPoint())
        return super().eventFilter(watched, event)

    def focusOutEvent(self, event):
        self._hovered_mark = None
        self.lintHoverChanged.emit(None, QPoint())
        super().focusOutEvent(event)

    def paintEvent(self, event):
        super().paintEvent(event)
        self._paint_lint_squiggles(event)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._apply_viewport_margins()

    # ---------- Gutter ----------

    def lineNumberAreaWidth(self):
        digits = 1
        max_num = max(1, self.blockCount())
        while max_num >= 10:
            max_num //= 10
            digits += 1
        space = 6 + self.fontMetrics().horizontalAdvance("9") * digits
        return space + int(self._gutter_icon_width)

    def updateLineNumberAreaWidth(self, _):
        self._apply_viewport_margins()

    def updateLineNumberArea(self, rect, dy):
        if dy:
            self.lineNumberArea.scroll(0, dy)
        else:
            self.lineNumberArea.update(0, rect.y(), self.lineNumberArea.width(), rect.height())
        if rect.contains(self.viewport().rect()):
            self.updateLineNumberAreaWidth(0)

    def _apply_viewport_margins(self):
        self.setViewportMargins(self.lineNumberAreaWidth(), 0, 0, 0)
        cr = self.contentsRect()
        self.lineNumberArea.setGeometry(QRect(cr.left(), cr.top(), self.lineNumberAreaWidth(), cr.height()))

    def lineNumberAreaPaintEvent(self, event):
        painter = QPainter(self.lineNumberArea)
        gutter = QColor(self._editor_background_color).darker(125)
        painter.fillRect(event.rect(), gutter)
        painter.setRenderHint(QPainter.Antialiasing, True)

        block = self.firstVisibleBlock()
        block_number = block.blockNumber()
        top = self.blockBoundingGeometry(block).translated(self.contentOffset()).top()
        bottom = top + self.blockBoundingRect(block).height()
        line_h = self.fontMetrics().height()
        number_color = QColor(gutter).lighter(155)

        while block.isValid() and top <= event.rect().bottom():
            if block.isVisible() and bottom >= event.rect().top():
                marker = self._gutter_markers.get(block_number)
                if marker is not None:
                    self._paint_gutter_icon(painter, marker[0], int(top), line_h)
                painter.setPen(number_color)
                painter.drawText(
                    int(self._gutter_icon_width),
                    int(top),
                    max(0, self.lineNumberArea.width() - int(self._gutter_icon_width) - 3),
                    line_h,
                    Qt.AlignRight,
                    str(block_number + 1),
                )
            block = block.next()
            top = bottom
            bottom = top + self.blockBoundingRect(block).height()
            block_number += 1
        painter.end()

    def _paint_gutter_icon(self, painter: QPainter, severity: str, top: int, line_h: int) -> None:
        size = max(6, min(int(self._gutter_icon_width) - 4, line_h - 4))
        x = 2
        y = top + max(0, (line_h - size) // 2)
        painter.setPen(Qt.NoPen)
        painter.setBrush(self._lint_color(severity))
        if severity == "error":
            painter.drawEllipse(x, y, size, size)
        elif severity == "warning":
            path = QPainterPath(QPointF(x + size / 2.0, y))
            path.lineTo(QPointF(x + size, y + size))
            path.lineTo(QPointF(x, y + size))
            path.closeSubpath()
            painter.drawPath(path)
        else:
            painter.drawRect(x + 1, y + 1, size - 2, size - 2)

    def lineNumberAreaMouseMoveEvent(self, event):
        y = int(event.position().y()) if hasattr(event, "position") else int(event.pos().y())
        line = self._block_number_at_y(y)
        marker = self._gutter_markers.get(line)
        if marker is None or not marker[1]:
            QToolTip.hideText()
            return
        pos = event.globalPosition().toPoint() if hasattr(event, "globalPosition") else event.globalPos()
        QToolTip.showText(pos + _TOOLTIP_OFFSET, marker[1], self.lineNumberArea)

    def _block_number_at_y(self, y: int) -> int:
        block = self.firstVisibleBlock()
        top = self.blockBoundingGeometry(block).translated(self.contentOffset()).top()
        while block.isValid():
            bottom = top + self.blockBoundingRect(block).height()
            if block.isVisible() and top <= y < bottom:
                return int(block.blockNumber())
            block = block.next()
            top = bottom
        return -1

    # ---------- Lint painting ----------

    def highlightCurrentLine(self):
        self._rebuild_extra_selections()

    def _schedule_lint_refresh(self) -> None:
        if not self._lint_repaint_timer.isActive():
            self._lint_repaint_timer.start()

    def _refresh_lint_visuals(self) -> None:
        self.viewport().update()
        self.lineNumberArea.update()

    def _rebuild_extra_selections(self):
        extra: list[QTextEdit.ExtraSelection] = []
        if not self.isReadOnly():
            selection = QTextEdit.ExtraSelection()
            line_color = QColor(self._editor_background_color).lighter(130)
            line_color.setAlpha(140)
            selection.format.setBackground(line_color)
            selection.format.setProperty(QTextFormat.FullWidthSelection, True)
            selection.cursor = self.textCursor()
            selection.cursor.clearSelection()
            extra.append(selection)
        self.setExtraSelections(extra)

    def _lint_color(self, severity: str) -> QColor:
        key = f"{severity}_color"
        return QColor(str(self._lint_visual_cfg.get(key) or _LINT_VISUAL_DEFAULTS["info_color"]))

    def _document_position(self, line: int, column: int) -> int:
        block = self.document().findBlockByNumber(max(0, int(line)))
        if not block.isValid():
            return -1
        col = max(0, min(int(column), len(block.text())))
        return int(block.position() + col)

    def _paint_lint_squiggles(self, event) -> None:
        if not self._lint_marks:
            return
        first, last = self._visible_line_range()
        if last < first:
            return

        painter = QPainter(self.viewport())
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setClipRect(event.rect())
        thickness = int(self._lint_visual_cfg.get("squiggle_thickness", 2))
        amplitude = 1.4 + (float(thickness) * 0.32)
        min_width = float(max(4, self.fontMetrics().horizontalAdvance(" ")))

        # Paint least severe first so errors end up on top.
        ordered = sorted(self._lint_marks, key=lambda m: _SEVERITY_RANK.get(_severity_name(m.severity), 0))
        for mark in ordered:
            span = mark.span
            if span.end_line < first or span.start_line > last:
                continue
            pen = QPen(self._lint_color(_severity_name(mark.severity)))
            pen.setWidth(thickness)
            pen.setCapStyle(Qt.RoundCap)
            painter.setPen(pen)

            for line, seg_start, seg_end in self._lint_line_segments(span, first, last):
                start_pos = self._document_position(line, seg_start)
                end_pos = self._document_position(line, seg_end)
                if start_pos < 0 or end_pos < 0:
                    continue
                start_cursor = QTextCursor(self.document())
                start_cursor.setPosition(start_pos)
                end_cursor = QTextCursor(self.document())
                end_cursor.setPosition(end_pos)
                start_rect = self.cursorRect(start_cursor)
                x1 = float(start_rect.left())
                x2 = float(self.cursorRect(end_cursor).left())
                if x2 - x1 < min_width:
                    # Point marks and marks past the line end stay visible.
                    x2 = x1 + min_width
                y = float(start_rect.bottom() - 1)
                self._draw_wave_segment(painter, x1, x2, y, amplitude=amplitude, step=3.8)
        painter.end()

    def _lint_line_segments(self, span, first: int, last: int) -> list[tuple[int, int, int]]:
        """Per-line column ranges of a mark within the visible lines."""
        out: list[tuple[int, int, int]] = []
        for line in range(max(span.start_line, first), min(span.end_line, last) + 1):
            # The end is exclusive, so a span ending at column 0 stops on the previous line.
            if line == span.end_line and span.end_column == 0 and span.end_line > span.start_line:
                continue
            block = self.document().findBlockByNumber(line)
            if not block.isValid() or not block.isVisible():
                continue
            seg_start = span.start_column if line == span.start_line else 0
            seg_end = span.end_column if line == span.end_line else len(block.text())
            out.append((line, seg_start, seg_end))
        return out

    @staticmethod
    def _draw_wave_segment(painter: QPainter, x1: float, x2: float, y: float, *, amplitude: float, step: float) -> None:
        if x2 <= x1:
            return
        path = QPainterPath(QPointF(x1, y))
        x = float(x1)
        up = True
        while x < x2:
            nx = min(x2, x + step)
            mid = (x + nx) / 2.0
            if up:
                path.quadTo(QPointF(mid, y - amplitude), QPointF(nx, y))
            else:
                path.quadTo(QPointF(mid, y + amplitude), QPointF(nx, y))
            up = not up
            x = nx
        painter.drawPath(path)

    def _visible_line_range(self) -> tuple[int, int]:
        block = self.firstVisibleBlock()
        if not block.isValid():
            return (0, -1)
        top = self.blockBoundingGeometry(block).translated(self.contentOffset()).top()
        bottom = top + self.blockBoundingRect(block).height()
        first = int(block.blockNumber())
        last = first
        viewport_bottom = float(self.viewport().rect().bottom())
        while block.isValid() and top <= viewport_bottom:
            if block.isVisible():
                last = int(block.blockNumber())
            block = block.next()
            top = bottom
            bottom = top + self.blockBoundingRect(block).height()
        return (first, last)

    def go_to_position(self, line: int, column: int) -> None:
        pos = self._document_position(line, column)
        if pos < 0:
            return
        cursor = self.textCursor()
        cursor.setPosition(pos)
        self.setTextCursor(cursor)
        self.centerCursor()
        self.setFocus()
