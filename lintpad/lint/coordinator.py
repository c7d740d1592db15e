from __future__ import annotations

import concurrent.futures
import queue
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, QTimer, Signal

from lintpad.lint.model import (
    Annotation,
    LintError,
    LintFailure,
    LintOutcome,
    LintSuccess,
    ParseError,
    Severity,
    TextRange,
    TransformationError,
    TransportError,
)

if TYPE_CHECKING:
    from lintpad.sources.base import AnnotationSource

PARSE_ERROR_EXPLANATION = (
    "A syntax error means the document could not be analysed at all. "
    "This is often caused by a missing closing bracket or tag. "
    "Check the surrounding text too, the actual mistake may be before or after the given position."
)
TRANSFORMATION_ERROR_EXPLANATION = (
    "The document was parsed but could not be processed further. "
    "This can happen with an unusual heading or list structure."
)


def annotation_for_failure(error: LintError) -> Annotation | None:
    """Synthetic annotation standing in for a failed analysis, or None if it has no position."""
    if isinstance(error, ParseError):
        return Annotation(
            range=TextRange.point(error.position),
            severity=Severity.ERROR,
            message="Syntax error!",
            long_explanation=PARSE_ERROR_EXPLANATION,
            suggestion="Expected one of: " + ", ".join(error.expected),
            kind="parseerror",
        )
    if isinstance(error, TransformationError):
        return Annotation(
            range=TextRange.point(error.position),
            severity=Severity.ERROR,
            message=error.cause or "Document could not be processed.",
            long_explanation=TRANSFORMATION_ERROR_EXPLANATION,
            suggestion="This document does not follow the usual document structure.",
            kind="transformationerror",
        )
    if isinstance(error, TransportError):
        return None
    raise TypeError(f"Unhandled lint error type: {type(error).__name__}")


def _outcome_from_future(future: concurrent.futures.Future) -> LintOutcome:
    if future.cancelled():
        return LintFailure(TransportError("Lint request was cancelled."))
    try:
        outcome = future.result()
    except Exception as exc:
        return LintFailure(TransportError(f"{type(exc).__name__}: {exc}"))
    if isinstance(outcome, (LintSuccess, LintFailure)):
        return outcome
    return LintFailure(TransportError(f"Source returned {type(outcome).__name__}, expected a lint outcome."))


class RequestCoordinator(QObject):
    """Issues lint requests and applies only the result of the newest one.

    Every ``trigger`` bumps the generation. Results are matched against the
    generation current at the time they are drained on the UI thread; anything
    older is dropped. In-flight source calls are never aborted.
    """

    annotationsAccepted = Signal(int, object)  # generation, list[Annotation]
    statusMessage = Signal(str)

    DEFAULT_POLL_MS = 35

    def __init__(self, source: AnnotationSource, *, poll_interval_ms: int = DEFAULT_POLL_MS, parent: QObject | None = None):
        super().__init__(parent)
        self._source = source
        self._generation = 0
        self._in_flight: set[concurrent.futures.Future] = set()
        self._result_queue: queue.Queue[tuple[int, concurrent.futures.Future]] = queue.Queue()
        self._result_pump = QTimer(self)
        self._result_pump.setInterval(max(1, int(poll_interval_ms)))
        self._result_pump.timeout.connect(self.drain_results)

    @property
    def current_generation(self) -> int:
        return self._generation

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    def trigger(self, document_text: str) -> int:
        self._generation += 1
        generation = self._generation
        try:
            future = self._source.request(document_text)
        except Exception as exc:
            future = concurrent.futures.Future()
            future.set_exception(exc)
        self._in_flight.add(future)
        future.add_done_callback(lambda f, g=generation: self._result_queue.put((g, f)))
        if not self._result_pump.isActive():
            self._result_pump.start()
        return generation

    def invalidate(self) -> None:
        self._generation += 1

    def drain_results(self) -> None:
        while True:
            try:
                generation, future = self._result_queue.get_nowait()
            except queue.Empty:
                break
            self._in_flight.discard(future)
            try:
                self._apply_result(generation, future)
            except Exception as exc:
                # A broken result must never take the editor down.
                self.statusMessage.emit(f"Lint result could not be applied: {exc}")
        if not self._in_flight:
            self._result_pump.stop()

    def shutdown(self) -> None:
        self.invalidate()
        self._result_pump.stop()
        self._in_flight.clear()

    def _apply_result(self, generation: int, future: concurrent.futures.Future) -> None:
        if generation != self._generation:
            return
        outcome = _outcome_from_future(future)
        if isinstance(outcome, LintSuccess):
            self.annotationsAccepted.emit(generation, list(outcome.annotations))
            return
        error = outcome.error
        synthetic = annotation_for_failure(error)
        if synthetic is None:
            detail = getattr(error, "detail", "") or "unknown error"
            self.statusMessage.emit(f"Linting failed, keeping previous results: {detail}")
            return
        self.annotationsAccepted.emit(generation, [synthetic])
