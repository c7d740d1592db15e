from __future__ import annotations

from enum import Enum
from typing import Any, Protocol

from PySide6.QtCore import QObject, QTimer, Signal

from lintpad.lint.rendering import LintMark


class TooltipView(Protocol):
    def show_tooltip(self, html: str, pos: Any) -> None: ...

    def move_tooltip(self, pos: Any) -> None: ...

    def begin_fade(self) -> None: ...

    def hide_tooltip(self) -> None: ...


class HoverState(Enum):
    IDLE = "idle"
    TRACKING = "tracking"
    SHOWING = "showing"


class HoverTooltipController(QObject):
    """Shows the explanation of the mark under the pointer.

    Idle -> Tracking when the pointer enters a mark, Tracking -> Showing once
    the pointer has rested on it for ``hover_delay_ms``, Showing -> Idle with a
    fade when it leaves. A tracked or shown mark that gets revoked by the
    renderer drops the controller back to Idle right away.
    """

    stateChanged = Signal(str)

    DEFAULT_HOVER_DELAY_MS = 180
    DEFAULT_FADE_MS = 150

    def __init__(
        self,
        view: TooltipView,
        *,
        hover_delay_ms: int = DEFAULT_HOVER_DELAY_MS,
        fade_ms: int = DEFAULT_FADE_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._view = view
        self._state = HoverState.IDLE
        self._mark: LintMark | None = None
        self._fading_mark: LintMark | None = None
        self._pos: Any = None

        self._hover_timer = QTimer(self)
        self._hover_timer.setSingleShot(True)
        self._hover_timer.setInterval(max(0, int(hover_delay_ms)))
        self._hover_timer.timeout.connect(self._on_hover_timer)

        self._fade_timer = QTimer(self)
        self._fade_timer.setSingleShot(True)
        self._fade_timer.setInterval(max(0, int(fade_ms)))
        self._fade_timer.timeout.connect(self._on_fade_timer)

    @property
    def state(self) -> HoverState:
        return self._state

    @property
    def mark(self) -> LintMark | None:
        return self._mark

    def is_fading(self) -> bool:
        return self._fading_mark is not None

    def pointer_moved(self, mark: LintMark | None, pos: Any) -> None:
        self._pos = pos
        if mark is not None and not mark.alive:
            mark = None

        if self._state is HoverState.SHOWING:
            if mark is self._mark:
                self._view.move_tooltip(pos)
                return
            self._leave()
        elif self._state is HoverState.TRACKING:
            if mark is self._mark:
                return
            self._hover_timer.stop()
            self._set_mark(None)
            self._set_state(HoverState.IDLE)

        if mark is None:
            return
        if mark is self._fading_mark:
            self._set_mark(mark)
            self._show()
            return
        self._set_mark(mark)
        self._set_state(HoverState.TRACKING)
        self._hover_timer.start()

    def pointer_left(self) -> None:
        self.pointer_moved(None, self._pos)

    def dispose(self, *, hide_view: bool = True) -> None:
        self._hover_timer.stop()
        self._fade_timer.stop()
        self._fading_mark = None
        self._set_mark(None)
        if hide_view:
            self._view.hide_tooltip()
        self._set_state(HoverState.IDLE)

    # ---------- Transitions ----------

    def _show(self) -> None:
        mark = self._mark
        if mark is None:
            return
        self._fade_timer.stop()
        self._fading_mark = None
        self._view.show_tooltip(mark.html, self._pos)
        self._set_state(HoverState.SHOWING)

    def _leave(self) -> None:
        self._fading_mark = self._mark
        self._set_mark(None)
        self._view.begin_fade()
        self._fade_timer.start()
        self._set_state(HoverState.IDLE)

    def _on_hover_timer(self) -> None:
        if self._state is not HoverState.TRACKING:
            return
        if self._mark is None or not self._mark.alive:
            self._set_mark(None)
            self._set_state(HoverState.IDLE)
            return
        self._show()

    def _on_fade_timer(self) -> None:
        self._fading_mark = None
        self._view.hide_tooltip()

    def _on_mark_revoked(self, mark: LintMark) -> None:
        if mark is not self._mark:
            return
        was_showing = self._state is HoverState.SHOWING
        self._hover_timer.stop()
        self._mark = None
        if was_showing:
            self._fade_timer.stop()
            self._view.hide_tooltip()
        self._set_state(HoverState.IDLE)

    def _set_mark(self, mark: LintMark | None) -> None:
        if self._mark is mark:
            return
        if self._mark is not None:
            self._mark.remove_revoke_listener(self._on_mark_revoked)
        self._mark = mark
        if mark is not None:
            mark.add_revoke_listener(self._on_mark_revoked)

    def _set_state(self, state: HoverState) -> None:
        if state is self._state:
            return
        self._state = state
        self.stateChanged.emit(state.value)
