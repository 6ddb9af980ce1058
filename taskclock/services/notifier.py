from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class TimerEventKind(StrEnum):
    STARTED = "started"
    PAUSED = "paused"
    RESET = "reset"


@dataclass(frozen=True)
class TimerEvent:
    kind: TimerEventKind
    task_id: int
    total_seconds: int


_STOP = object()


def log_timer_event(event: TimerEvent) -> None:
    logger.info(
        "Timer %s task_id=%s total_seconds=%s",
        event.kind.value,
        event.task_id,
        event.total_seconds,
    )


class TimerNotifier:
    """Fire-and-forget dispatch of timer transitions to a side-effect handler.

    Events go through a queue drained by a single daemon thread, so the caller
    never waits on the handler. A PAUSED or RESET event for a task follows its
    STARTED event on the same channel; handlers that start something long-lived
    on STARTED stop it there.
    """

    def __init__(self, handler: Callable[[TimerEvent], None] = log_timer_event) -> None:
        self._handler = handler
        self._queue: queue.Queue = queue.Queue()
        self._thread = threading.Thread(target=self._run, name="timer-notifier", daemon=True)
        self._closed = False
        self._thread.start()

    def __call__(self, event: TimerEvent) -> None:
        self.notify(event)

    def notify(self, event: TimerEvent) -> None:
        if self._closed:
            return
        self._queue.put(event)

    def close(self, timeout: float | None = 2.0) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put(_STOP)
        self._thread.join(timeout)

    def _run(self) -> None:
        while True:
            event = self._queue.get()
            if event is _STOP:
                return
            try:
                self._handler(event)
            except Exception:  # noqa: BLE001
                logger.exception("Timer event handler failed for %s", event)
