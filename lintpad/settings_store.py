from __future__ import annotations

import json
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

from lintpad.settings_schema import default_lint_settings, normalize_lint_settings

SETTINGS_DIRNAME = ".lintpad"
SETTINGS_FILENAME = "settings.json"


class SettingsStoreError(RuntimeError):
    """Raised when a settings file cannot be saved."""


def default_app_settings() -> dict[str, Any]:
    return {
        "lint": dict(default_lint_settings()),
        "editor": {
            "font_family": "Monospace",
            "font_size": 11,
            "tab_width": 4,
        },
        "window": {
            "width": 1100,
            "height": 760,
        },
    }


def default_settings_path() -> Path:
    override = os.environ.get("LINTPAD_SETTINGS_DIR", "").strip()
    base = Path(override).expanduser() if override else Path.home() / SETTINGS_DIRNAME
    return base / SETTINGS_FILENAME


def deep_merge_defaults(data: Mapping[str, Any], defaults: Mapping[str, Any]) -> dict[str, Any]:
    """Merge defaults into data without overwriting explicitly provided values."""
    merged = deepcopy(dict(data))
    for key, default_value in defaults.items():
        if key not in merged:
            merged[key] = deepcopy(default_value)
            continue
        current = merged[key]
        if isinstance(current, dict) and isinstance(default_value, dict):
            merged[key] = deep_merge_defaults(current, default_value)
    return merged


def dot_get(data: Mapping[str, Any], key: str, default: Any = None) -> Any:
    if not key:
        return data
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def dot_set(data: dict[str, Any], key: str, value: Any) -> None:
    if not key:
        raise ValueError("Key cannot be empty.")
    current: dict[str, Any] = data
    parts = key.split(".")
    for part in parts[:-1]:
        next_value = current.get(part)
        if not isinstance(next_value, dict):
            next_value = {}
            current[part] = next_value
        current = next_value
    current[parts[-1]] = value


class JsonSettingsStore:
    """JSON-backed mutable store with defaults and dot-key helpers."""

    def __init__(self, path: Path | str | None = None, defaults: Mapping[str, Any] | None = None) -> None:
        self.path = Path(path) if path else default_settings_path()
        self.defaults: dict[str, Any] = deepcopy(dict(defaults if defaults is not None else default_app_settings()))
        self.data: dict[str, Any] = {}
        self.dirty: bool = False
        self.last_error: str | None = None

    def load(self) -> dict[str, Any]:
        missing = not self.path.exists()
        loaded: dict[str, Any] = {}
        self.last_error = None

        if not missing:
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
                if isinstance(raw, dict):
                    loaded = raw
                else:
                    self.last_error = (
                        f"Settings root in '{self.path}' must be a JSON object, "
                        f"found {type(raw).__name__}."
                    )
            except Exception as exc:
                # Keep the app usable without touching the broken file.
                self.last_error = str(exc)

        self.data = deep_merge_defaults(loaded, self.defaults)
        self.dirty = missing
        return self.data

    def save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.data, indent=2, sort_keys=True), encoding="utf-8")
            self.dirty = False
            self.last_error = None
        except Exception as exc:
            raise SettingsStoreError(f"Could not write settings file '{self.path}': {exc}") from exc

    def get(self, key: str, default: Any = None) -> Any:
        return dot_get(self.data, key, default)

    def set(self, key: str, value: Any) -> bool:
        current = self.get(key)
        if current == value:
            return False
        dot_set(self.data, key, value)
        self.dirty = True
        return True

    def lint_settings(self):
        return normalize_lint_settings(self.get("lint", {}))

    def snapshot(self) -> dict[str, Any]:
        return deepcopy(self.data)
