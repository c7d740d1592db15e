import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from lintpad.settings_store import JsonSettingsStore
from lintpad.ui.main_window import LintEditorWindow


def _split_startup_args(argv: list[str]) -> tuple[str | None, str | None]:
    settings_path: str | None = None
    file_arg: str | None = None
    args = list(argv)
    while args:
        arg = args.pop(0)
        if arg == "--settings" and args:
            settings_path = args.pop(0)
            continue
        if file_arg is None and not arg.startswith("-"):
            file_arg = arg
    return file_arg, settings_path


def _existing_file(path_value: str | None) -> Path | None:
    text = str(path_value or "").strip()
    if not text:
        return None
    candidate = Path(text).expanduser()
    return candidate if candidate.is_file() else None


if __name__ == "__main__":
    file_arg, settings_path = _split_startup_args(sys.argv[1:])

    settings = JsonSettingsStore(settings_path)
    settings.load()

    app = QApplication([sys.argv[0]])
    app.setStyle("Fusion")
    app.setApplicationName(LintEditorWindow.APP_NAME)
    window = LintEditorWindow(settings)
    startup_file = _existing_file(file_arg)
    if startup_file is not None:
        window.open_file(startup_file)
    window.show()
    sys.exit(app.exec())
