from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, QTimer


class DebounceScheduler(QObject):
    """Coalesces edit notifications into one trigger after ``delay_ms`` of quiet."""

    DEFAULT_DELAY_MS = 500

    def __init__(
        self,
        on_fire: Callable[[], None],
        *,
        delay_ms: int = DEFAULT_DELAY_MS,
        is_enabled: Callable[[], bool] | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._on_fire = on_fire
        self._is_enabled = is_enabled or (lambda: True)
        self._delay_ms = max(0, int(delay_ms))
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    def set_delay(self, delay_ms: int) -> None:
        self._delay_ms = max(0, int(delay_ms))

    def is_pending(self) -> bool:
        return self._timer.isActive()

    def notify_changed(self) -> None:
        if not self._is_enabled():
            return
        # QTimer.start() on an active timer restarts it.
        self._timer.start(self._delay_ms)

    def cancel(self) -> None:
        self._timer.stop()

    def flush(self) -> None:
        if not self._timer.isActive():
            return
        self._timer.stop()
        self._on_timeout()

    def _on_timeout(self) -> None:
        # May fire after the owning session was disabled or torn down.
        if not self._is_enabled():
            return
        self._on_fire()
