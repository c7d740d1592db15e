"""Per-editor lint state and the wiring between the lint components."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from PySide6.QtCore import QObject, Signal
from shiboken6 import isValid as _is_qobject_valid

from lintpad.lint.coordinator import RequestCoordinator
from lintpad.lint.debounce import DebounceScheduler
from lintpad.lint.explanations import ExampleLookup, annotation_plain_text
from lintpad.lint.grouping import group
from lintpad.lint.model import Annotation, normalize_annotation
from lintpad.lint.rendering import LintMark, MarkRenderer
from lintpad.lint.tooltip import HoverTooltipController, TooltipView
from lintpad.settings_schema import NormalizedLintConfig

if TYPE_CHECKING:
    from lintpad.sources.base import AnnotationSource


class _NullTooltipView:
    def show_tooltip(self, html: str, pos: Any) -> None:
        return None

    def move_tooltip(self, pos: Any) -> None:
        return None

    def begin_fade(self) -> None:
        return None

    def hide_tooltip(self) -> None:
        return None


def _connect(obj: Any, signal_name: str, slot) -> bool:
    signal = getattr(obj, signal_name, None)
    if signal is None or not hasattr(signal, "connect"):
        return False
    signal.connect(slot)
    return True


def _is_alive(obj: Any) -> bool:
    if obj is None:
        return False
    return not isinstance(obj, QObject) or _is_qobject_valid(obj)


def _disconnect(obj: Any, signal_name: str, slot) -> None:
    signal = getattr(obj, signal_name, None)
    if signal is None or not hasattr(signal, "disconnect"):
        return
    try:
        signal.disconnect(slot)
    except (RuntimeError, TypeError):
        pass


class EditorLintSession(QObject):
    """Lint state owned by exactly one editor.

    The editor must provide ``toPlainText()`` and the lint surface methods used
    by ``MarkRenderer``. ``textChanged``, ``lintHoverChanged``, ``destroyed``
    and ``set_lint_provider`` are used when present.
    """

    annotationsChanged = Signal(object)  # list[Annotation]
    summaryChanged = Signal(object, str)  # {Severity: count}, text
    statusMessage = Signal(str)

    def __init__(
        self,
        editor: Any,
        source: AnnotationSource,
        *,
        config: NormalizedLintConfig | None = None,
        example_lookup: ExampleLookup | None = None,
        tooltip_view: TooltipView | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        cfg = config or NormalizedLintConfig.from_mapping({})
        self._editor = editor
        self._enabled = bool(cfg.enabled)
        self._disposed = False
        self._last_annotations: list[Annotation] = []

        self._debounce = DebounceScheduler(
            self._trigger,
            delay_ms=cfg.debounce_ms,
            is_enabled=self.is_enabled,
            parent=self,
        )
        self._coordinator = RequestCoordinator(source, poll_interval_ms=cfg.result_poll_ms, parent=self)
        self._coordinator.annotationsAccepted.connect(self._on_annotations_accepted)
        self._coordinator.statusMessage.connect(self.statusMessage)

        # gutter visibility is fixed for the lifetime of the session
        self._renderer = MarkRenderer(
            editor,
            gutter_enabled=cfg.gutter,
            example_lookup=example_lookup if cfg.show_examples else None,
            on_summary=self._publish_summary,
        )

        view = tooltip_view
        if view is None:
            view = getattr(editor, "lint_tooltip", None) or _NullTooltipView()
        self._tooltip_view = view
        fade_setter = getattr(view, "set_fade_ms", None)
        if callable(fade_setter):
            fade_setter(cfg.tooltip_fade_ms)
        self._tooltip = HoverTooltipController(
            view,
            hover_delay_ms=cfg.hover_delay_ms,
            fade_ms=cfg.tooltip_fade_ms,
            parent=self,
        )

        _connect(editor, "textChanged", self.notify_changed)
        _connect(editor, "lintHoverChanged", self._on_hover_changed)
        _connect(editor, "destroyed", self._on_editor_destroyed)
        provider_setter = getattr(editor, "set_lint_provider", None)
        if callable(provider_setter):
            provider_setter(self.renderable_marks)

    # ---------- Public API ----------

    @property
    def editor(self) -> Any:
        return self._editor

    @property
    def coordinator(self) -> RequestCoordinator:
        return self._coordinator

    @property
    def debounce(self) -> DebounceScheduler:
        return self._debounce

    @property
    def renderer(self) -> MarkRenderer:
        return self._renderer

    @property
    def tooltip(self) -> HoverTooltipController:
        return self._tooltip

    @property
    def current_generation(self) -> int:
        return self._coordinator.current_generation

    @property
    def live_marks(self) -> tuple[LintMark, ...]:
        return self._renderer.live_marks

    @property
    def gutter_enabled(self) -> bool:
        return self._renderer.gutter_enabled

    @property
    def annotations(self) -> list[Annotation]:
        return list(self._last_annotations)

    def is_enabled(self) -> bool:
        return self._enabled and not self._disposed

    def is_disposed(self) -> bool:
        return self._disposed

    def notify_changed(self) -> None:
        self._debounce.notify_changed()

    def lint_now(self) -> None:
        self._debounce.cancel()
        self._trigger()

    def set_enabled(self, enabled: bool) -> None:
        if self._disposed:
            return
        enabled = bool(enabled)
        if enabled == self._enabled:
            return
        self._enabled = enabled
        if enabled:
            self.lint_now()
            return
        self._debounce.cancel()
        self._coordinator.invalidate()
        self._tooltip.dispose()
        self._last_annotations = []
        self._renderer.clear()
        self.annotationsChanged.emit([])
        self.statusMessage.emit("Lint is disabled.")

    def renderable_marks(self) -> list[dict]:
        """Marks in the shape the editor's lint capability expects."""
        out: list[dict] = []
        for mark in self._renderer.live_marks:
            span = mark.span
            out.append(
                {
                    "from": (span.start_line, span.start_column),
                    "to": (span.end_line, span.end_column),
                    "message_html": mark.html,
                    "message": annotation_plain_text(mark.annotation),
                    "severity": mark.severity.value,
                }
            )
        return out

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._debounce.cancel()
        self._coordinator.shutdown()
        # The tooltip widget may have been deleted together with the editor.
        self._tooltip.dispose(hide_view=_is_alive(self._tooltip_view))
        self._last_annotations = []
        editor, self._editor = self._editor, None
        if not _is_alive(editor):
            return
        _disconnect(editor, "textChanged", self.notify_changed)
        _disconnect(editor, "lintHoverChanged", self._on_hover_changed)
        _disconnect(editor, "destroyed", self._on_editor_destroyed)
        self._renderer.clear()
        provider_setter = getattr(editor, "set_lint_provider", None)
        if callable(provider_setter):
            provider_setter(None)

    # ---------- Internals ----------

    def _trigger(self) -> None:
        if not self.is_enabled() or self._editor is None:
            return
        self._coordinator.trigger(self._editor.toPlainText())

    def _on_annotations_accepted(self, _generation: int, annotations: object) -> None:
        if not self.is_enabled():
            return
        items = [normalize_annotation(a) for a in (annotations or []) if isinstance(a, Annotation)]
        self._last_annotations = items
        self._renderer.render(group(items))
        self.annotationsChanged.emit(list(items))

    def _on_hover_changed(self, mark: object, pos: object) -> None:
        self._tooltip.pointer_moved(mark if isinstance(mark, LintMark) else None, pos)

    def _on_editor_destroyed(self, *_args) -> None:
        # The widget is gone, so only internal state is torn down here.
        self._editor = None
        self.dispose()

    def _publish_summary(self, counts: dict, text: str) -> None:
        self.summaryChanged.emit(dict(counts), text)
