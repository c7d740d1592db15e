"""Tests for lint settings normalization and the JSON settings store."""

import json
import tempfile
from pathlib import Path

import pytest

from lintpad.settings_schema import NormalizedLintConfig, default_lint_settings, normalize_lint_settings
from lintpad.settings_store import (
    JsonSettingsStore,
    SettingsStoreError,
    deep_merge_defaults,
    default_settings_path,
    dot_get,
    dot_set,
)


def test_defaults():
    cfg = NormalizedLintConfig.from_mapping({})
    assert cfg.enabled is True
    assert cfg.debounce_ms == 500
    assert cfg.gutter is True
    assert cfg.backend == "http"
    assert cfg.visual == default_lint_settings()["visual"]


def test_values_are_clamped():
    n = normalize_lint_settings(
        {
            "debounce_ms": 5,
            "hover_delay_ms": 99999,
            "request_timeout_s": "0",
            "visual": {"squiggle_thickness": 40},
        }
    )
    assert n["debounce_ms"] == 100
    assert n["hover_delay_ms"] == 2000
    assert n["request_timeout_s"] == 0.5
    assert n["visual"]["squiggle_thickness"] == 6


def test_invalid_values_fall_back():
    n = normalize_lint_settings(
        {
            "debounce_ms": "soon",
            "backend": "carrier-pigeon",
            "visual": {"error_color": "red", "info_color": "#112233"},
        }
    )
    assert n["debounce_ms"] == 500
    assert n["backend"] == "http"
    assert n["visual"]["error_color"] == "#E35D6A"
    assert n["visual"]["info_color"] == "#112233"


def test_non_mapping_input():
    assert normalize_lint_settings(None) == normalize_lint_settings({})
    assert normalize_lint_settings({"visual": "x"})["visual"] == default_lint_settings()["visual"]


def test_command_backend():
    cfg = NormalizedLintConfig.from_mapping({"backend": "COMMAND", "command": " mwlint --json "})
    assert cfg.backend == "command"
    assert cfg.command == "mwlint --json"


def test_dot_helpers():
    data = {}
    dot_set(data, "lint.visual.error_color", "#000000")
    assert data == {"lint": {"visual": {"error_color": "#000000"}}}
    assert dot_get(data, "lint.visual.error_color") == "#000000"
    assert dot_get(data, "lint.missing", "fallback") == "fallback"
    with pytest.raises(ValueError):
        dot_set(data, "", 1)


def test_deep_merge_keeps_explicit_values():
    merged = deep_merge_defaults({"lint": {"debounce_ms": 900}}, {"lint": {"debounce_ms": 500, "gutter": True}, "x": 1})
    assert merged == {"lint": {"debounce_ms": 900, "gutter": True}, "x": 1}


def test_store_roundtrip():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "nested" / "settings.json"
        store = JsonSettingsStore(path)
        store.load()
        assert store.dirty
        assert store.get("lint.debounce_ms") == 500

        assert store.set("lint.debounce_ms", 750)
        assert not store.set("lint.debounce_ms", 750)
        store.save()
        assert not store.dirty

        reloaded = JsonSettingsStore(path)
        reloaded.load()
        assert reloaded.get("lint.debounce_ms") == 750
        assert reloaded.lint_settings()["debounce_ms"] == 750
        assert reloaded.get("editor.tab_width") == 4


def test_broken_file_keeps_defaults_and_reports():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "settings.json"
        path.write_text("[1, 2", encoding="utf-8")
        store = JsonSettingsStore(path)
        store.load()
        assert store.last_error
        assert store.get("lint.enabled") is True
        assert path.read_text(encoding="utf-8") == "[1, 2"


def test_non_object_root_is_reported():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "settings.json"
        path.write_text(json.dumps([1, 2]), encoding="utf-8")
        store = JsonSettingsStore(path)
        store.load()
        assert "JSON object" in store.last_error


def test_save_failure_raises_store_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        blocker = Path(tmpdir) / "file"
        blocker.write_text("", encoding="utf-8")
        store = JsonSettingsStore(blocker / "settings.json")
        store.load()
        with pytest.raises(SettingsStoreError):
            store.save()


def test_settings_dir_override(monkeypatch, tmp_path):
    monkeypatch.setenv("LINTPAD_SETTINGS_DIR", str(tmp_path))
    assert default_settings_path() == tmp_path / "settings.json"
