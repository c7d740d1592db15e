from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QAbstractItemView,
    QApplication,
    QHBoxLayout,
    QMenu,
    QTableWidget,
    QTableWidgetItem,
    QWidget,
)

from lintpad.lint.grouping import group
from lintpad.lint.model import Annotation


class ProblemsPanel(QWidget):
    problemActivated = Signal(int, int)  # 1-based line, col
    relintRequested = Signal()
    countChanged = Signal(int)

    COLUMNS = ["Severity", "Line", "Col", "Message", "Suggestion", "Kind"]

    def __init__(self, parent=None):
        super().__init__(parent)
        self._rows: list[Annotation] = []

        self.table = QTableWidget(0, len(self.COLUMNS), self)
        self.table.setHorizontalHeaderLabels(self.COLUMNS)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SingleSelection)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSortingEnabled(False)
        self.table.setContextMenuPolicy(Qt.CustomContextMenu)

        self.table.doubleClicked.connect(self._activate_current_row)
        self.table.customContextMenuRequested.connect(self._show_context_menu)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.table)

    def set_annotations(self, annotations: list[Annotation]):
        rows: list[Annotation] = []
        for entry in group(a for a in annotations or [] if isinstance(a, Annotation)):
            rows.extend(entry.annotations)
        self._rows = rows
        self._render_rows()
        self.countChanged.emit(len(self._rows))

    def clear(self):
        self._rows = []
        self._render_rows()
        self.countChanged.emit(0)

    def row_count(self) -> int:
        return len(self._rows)

    def _render_rows(self):
        self.table.setRowCount(len(self._rows))
        for row, annotation in enumerate(self._rows):
            start = annotation.range.start
            values = [
                annotation.severity.value,
                str(start.line),
                str(start.column),
                annotation.message,
                annotation.suggestion,
                annotation.kind,
            ]
            for col_idx, value in enumerate(values):
                item = QTableWidgetItem(value)
                item.setData(Qt.UserRole, row)
                if col_idx in (1, 2):
                    item.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
                self.table.setItem(row, col_idx, item)

        self.table.resizeColumnsToContents()
        self.table.horizontalHeader().setStretchLastSection(True)

    def _activate_current_row(self):
        annotation = self._annotation_for_row(self.table.currentRow())
        if annotation is None:
            return
        start = annotation.range.start
        self.problemActivated.emit(int(start.line), int(start.column))

    def _annotation_for_row(self, row: int) -> Optional[Annotation]:
        if row < 0 or row >= len(self._rows):
            return None
        return self._rows[row]

    def _show_context_menu(self, pos):
        annotation = self._annotation_for_row(self.table.rowAt(pos.y()))
        menu = QMenu(self)

        act_copy_message = QAction("Copy Message", self)
        act_copy_message.setEnabled(annotation is not None)
        act_copy_message.triggered.connect(lambda: self._copy_message(annotation))
        menu.addAction(act_copy_message)

        act_copy_line = QAction("Copy Line:Col", self)
        act_copy_line.setEnabled(annotation is not None)
        act_copy_line.triggered.connect(lambda: self._copy_position(annotation))
        menu.addAction(act_copy_line)

        menu.addSeparator()

        act_relint = QAction("Lint Again", self)
        act_relint.triggered.connect(self.relintRequested.emit)
        menu.addAction(act_relint)

        menu.exec(self.table.viewport().mapToGlobal(pos))

    def _copy_message(self, annotation: Optional[Annotation]):
        if annotation is None or not annotation.message:
            return
        QApplication.clipboard().setText(annotation.message)

    def _copy_position(self, annotation: Optional[Annotation]):
        if annotation is None:
            return
        start = annotation.range.start
        QApplication.clipboard().setText(f"{start.line}:{start.column}")
