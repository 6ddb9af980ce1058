from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidOperation
from .timer import Clock, Timer


@dataclass
class TaskRecord:
    id: int
    description: str
    completed: bool = False
    accumulated_seconds: int = 0
    timer: Timer | None = None

    @property
    def timer_running(self) -> bool:
        return self.timer is not None

    def total_elapsed(self, clock: Clock) -> int:
        if self.timer_running:
            return self.accumulated_seconds + self.timer.elapsed(clock)
        return self.accumulated_seconds

    def start_timer(self, clock: Clock) -> None:
        if self.timer_running:
            raise InvalidOperation(f"timer for task {self.id} is already running")
        self.timer = Timer.start(clock)

    def pause_timer(self, clock: Clock) -> int:
        if not self.timer_running:
            raise InvalidOperation(f"timer for task {self.id} is not running")
        self.accumulated_seconds += self.timer.elapsed(clock)
        self.timer = None
        return self.accumulated_seconds

    def reset_timer(self) -> None:
        # In-flight running time is discarded, not folded in.
        self.accumulated_seconds = 0
        self.timer = None


@dataclass(frozen=True)
class TaskView:
    id: int
    description: str
    completed: bool
    display_elapsed_seconds: int
    timer_running: bool
    dragging: bool = False
    editing: bool = False


@dataclass(frozen=True)
class SessionStats:
    total: int
    completed: int
    pending: int
    total_seconds: int
