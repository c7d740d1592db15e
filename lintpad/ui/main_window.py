from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QFont, QKeySequence
from PySide6.QtWidgets import QDockWidget, QFileDialog, QLabel, QMainWindow, QMessageBox

from LintpadPyside.widgets import CodeEditor
from lintpad.lint.session import EditorLintSession
from lintpad.settings_schema import NormalizedLintConfig
from lintpad.settings_store import JsonSettingsStore, SettingsStoreError
from lintpad.sources.examples import ExampleTable
from lintpad.sources.factory import create_annotation_source
from lintpad.ui.problems_panel import ProblemsPanel


class LintEditorWindow(QMainWindow):
    APP_NAME = "lintpad"

    def __init__(self, settings: JsonSettingsStore, parent=None):
        super().__init__(parent)
        self._settings = settings
        self._file_path: Path | None = None
        self._lint_cfg = NormalizedLintConfig.from_mapping(settings.get("lint", {}))

        self.editor = CodeEditor(self)
        self.editor.setFont(
            QFont(str(settings.get("editor.font_family", "Monospace")), int(settings.get("editor.font_size", 11)))
        )
        self.editor.update_lint_visual_settings(self._lint_cfg.visual)
        self.setCentralWidget(self.editor)

        self.problems = ProblemsPanel(self)
        dock = QDockWidget("Problems", self)
        dock.setObjectName("problemsDock")
        dock.setWidget(self.problems)
        self.addDockWidget(Qt.BottomDockWidgetArea, dock)

        self._summary_label = QLabel("", self)
        self.statusBar().addPermanentWidget(self._summary_label)

        self._source = create_annotation_source(self._lint_cfg)
        self._examples = ExampleTable.from_file(self._lint_cfg.examples_path or None)
        self.session = EditorLintSession(
            self.editor,
            self._source,
            config=self._lint_cfg,
            example_lookup=self._examples.lookup,
            parent=self,
        )
        self.session.annotationsChanged.connect(self.problems.set_annotations)
        self.session.summaryChanged.connect(lambda _counts, text: self._summary_label.setText(text))
        self.session.statusMessage.connect(lambda msg: self.statusBar().showMessage(msg, 6000))
        self.problems.problemActivated.connect(lambda line, col: self.editor.go_to_position(line - 1, col - 1))
        self.problems.relintRequested.connect(self.session.lint_now)

        self._build_menus()
        self.resize(int(settings.get("window.width", 1100)), int(settings.get("window.height", 760)))
        self._update_title()
        if settings.last_error:
            self.statusBar().showMessage(f"Settings could not be read: {settings.last_error}", 8000)

    def _build_menus(self):
        file_menu = self.menuBar().addMenu("&File")
        act_open = QAction("&Open...", self)
        act_open.setShortcut(QKeySequence.Open)
        act_open.triggered.connect(self._prompt_open)
        file_menu.addAction(act_open)

        act_save = QAction("&Save", self)
        act_save.setShortcut(QKeySequence.Save)
        act_save.triggered.connect(self.save_file)
        file_menu.addAction(act_save)

        file_menu.addSeparator()
        act_quit = QAction("&Quit", self)
        act_quit.setShortcut(QKeySequence.Quit)
        act_quit.triggered.connect(self.close)
        file_menu.addAction(act_quit)

        lint_menu = self.menuBar().addMenu("&Lint")
        act_lint_now = QAction("Lint &Now", self)
        act_lint_now.setShortcut(QKeySequence("F7"))
        act_lint_now.triggered.connect(self.session.lint_now)
        lint_menu.addAction(act_lint_now)

        self._act_toggle = QAction("&Enable Linting", self)
        self._act_toggle.setCheckable(True)
        self._act_toggle.setChecked(self.session.is_enabled())
        self._act_toggle.toggled.connect(self._on_toggle_lint)
        lint_menu.addAction(self._act_toggle)

    def open_file(self, path: str | Path) -> bool:
        target = Path(path).expanduser()
        try:
            text = target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            QMessageBox.warning(self, self.APP_NAME, f"Could not open '{target}':\n{exc}")
            return False
        self._file_path = target
        self.editor.setPlainText(text)
        self.session.lint_now()
        self._update_title()
        return True

    def save_file(self) -> bool:
        if self._file_path is None:
            selected, _ = QFileDialog.getSaveFileName(self, "Save As")
            if not selected:
                return False
            self._file_path = Path(selected)
        try:
            self._file_path.write_text(self.editor.toPlainText(), encoding="utf-8")
        except OSError as exc:
            QMessageBox.warning(self, self.APP_NAME, f"Could not save '{self._file_path}':\n{exc}")
            return False
        self.statusBar().showMessage(f"Saved {self._file_path}", 4000)
        self.session.lint_now()
        self._update_title()
        return True

    def _prompt_open(self):
        selected, _ = QFileDialog.getOpenFileName(self, "Open")
        if selected:
            self.open_file(selected)

    def _on_toggle_lint(self, checked: bool):
        self.session.set_enabled(checked)
        self._settings.set("lint.enabled", bool(checked))

    def _update_title(self):
        name = self._file_path.name if self._file_path is not None else "untitled"
        self.setWindowTitle(f"{name} - {self.APP_NAME}")

    def closeEvent(self, event):
        self.session.dispose()
        self._source.shutdown()
        if self._settings.dirty:
            try:
                self._settings.save()
            except SettingsStoreError as exc:
                QMessageBox.warning(self, self.APP_NAME, str(exc))
        super().closeEvent(event)
