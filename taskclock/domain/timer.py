from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        ...


class MonotonicClock:
    def now(self) -> float:
        return time.monotonic()


@dataclass(frozen=True)
class Timer:
    """A running timer; stopping one folds it into the task and drops it."""

    started_at: float

    @classmethod
    def start(cls, clock: Clock) -> Timer:
        return cls(started_at=clock.now())

    def elapsed(self, clock: Clock) -> int:
        return max(int(clock.now() - self.started_at), 0)


def format_elapsed(total_seconds: int) -> str:
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02}:{minutes:02}:{seconds:02}"
