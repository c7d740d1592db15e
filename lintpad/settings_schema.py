from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, TypedDict

LINT_BACKENDS = (
    "http",
    "command",
)

_COLOR_HEX_RE = re.compile(r"^#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


class LintVisualSettings(TypedDict, total=False):
    error_color: str
    warning_color: str
    info_color: str
    squiggle_thickness: int


class LintSettings(TypedDict, total=False):
    enabled: bool
    debounce_ms: int
    gutter: bool
    hover_delay_ms: int
    tooltip_fade_ms: int
    result_poll_ms: int
    backend: str
    backend_url: str
    command: str
    request_timeout_s: float
    examples_path: str
    show_examples: bool
    visual: LintVisualSettings


def default_lint_settings() -> LintSettings:
    return {
        "enabled": True,
        "debounce_ms": 500,
        "gutter": True,
        "hover_delay_ms": 180,
        "tooltip_fade_ms": 150,
        "result_poll_ms": 35,
        "backend": "http",
        "backend_url": "http://127.0.0.1:8000/",
        "command": "",
        "request_timeout_s": 20.0,
        "examples_path": "",
        "show_examples": True,
        "visual": {
            "error_color": "#E35D6A",
            "warning_color": "#D6A54A",
            "info_color": "#6AA1FF",
            "squiggle_thickness": 2,
        },
    }


def normalize_lint_settings(raw: Any) -> LintSettings:
    defaults = default_lint_settings()
    data: dict[str, Any] = dict(defaults)
    if isinstance(raw, dict):
        for key, value in raw.items():
            data[str(key)] = value

    backend = str(data.get("backend", defaults["backend"]) or defaults["backend"]).strip().lower()
    if backend not in LINT_BACKENDS:
        backend = defaults["backend"]

    def _clamp_int(value: Any, low: int, high: int, fallback: int) -> int:
        try:
            return max(low, min(high, int(value)))
        except Exception:
            return fallback

    def _clamp_float(value: Any, low: float, high: float, fallback: float) -> float:
        try:
            return max(low, min(high, float(value)))
        except Exception:
            return fallback

    def _color(value: Any, fallback: str) -> str:
        text = str(value or "").strip()
        return text if _COLOR_HEX_RE.match(text) else fallback

    visual_defaults = defaults["visual"]
    visual_raw = data.get("visual")
    if not isinstance(visual_raw, dict):
        visual_raw = {}

    return {
        "enabled": bool(data.get("enabled", defaults["enabled"])),
        "debounce_ms": _clamp_int(data.get("debounce_ms"), 100, 5000, int(defaults["debounce_ms"])),
        "gutter": bool(data.get("gutter", defaults["gutter"])),
        "hover_delay_ms": _clamp_int(data.get("hover_delay_ms"), 0, 2000, int(defaults["hover_delay_ms"])),
        "tooltip_fade_ms": _clamp_int(data.get("tooltip_fade_ms"), 0, 2000, int(defaults["tooltip_fade_ms"])),
        "result_poll_ms": _clamp_int(data.get("result_poll_ms"), 5, 1000, int(defaults["result_poll_ms"])),
        "backend": backend,
        "backend_url": str(data.get("backend_url", defaults["backend_url"]) or "").strip(),
        "command": str(data.get("command", defaults["command"]) or "").strip(),
        "request_timeout_s": _clamp_float(data.get("request_timeout_s"), 0.5, 300.0, float(defaults["request_timeout_s"])),
        "examples_path": str(data.get("examples_path", defaults["examples_path"]) or "").strip(),
        "show_examples": bool(data.get("show_examples", defaults["show_examples"])),
        "visual": {
            "error_color": _color(visual_raw.get("error_color"), visual_defaults["error_color"]),
            "warning_color": _color(visual_raw.get("warning_color"), visual_defaults["warning_color"]),
            "info_color": _color(visual_raw.get("info_color"), visual_defaults["info_color"]),
            "squiggle_thickness": _clamp_int(
                visual_raw.get("squiggle_thickness"), 1, 6, int(visual_defaults["squiggle_thickness"])
            ),
        },
    }


@dataclass(slots=True)
class NormalizedLintConfig:
    enabled: bool
    debounce_ms: int
    gutter: bool
    hover_delay_ms: int
    tooltip_fade_ms: int
    result_poll_ms: int
    backend: str
    backend_url: str
    command: str
    request_timeout_s: float
    examples_path: str
    show_examples: bool
    visual: dict[str, Any]

    @classmethod
    def from_mapping(cls, data: Any) -> "NormalizedLintConfig":
        n = normalize_lint_settings(data)
        return cls(
            enabled=bool(n["enabled"]),
            debounce_ms=int(n["debounce_ms"]),
            gutter=bool(n["gutter"]),
            hover_delay_ms=int(n["hover_delay_ms"]),
            tooltip_fade_ms=int(n["tooltip_fade_ms"]),
            result_poll_ms=int(n["result_poll_ms"]),
            backend=str(n["backend"]),
            backend_url=str(n["backend_url"]),
            command=str(n["command"]),
            request_timeout_s=float(n["request_timeout_s"]),
            examples_path=str(n["examples_path"]),
            show_examples=bool(n["show_examples"]),
            visual=dict(n["visual"]),
        )
