from __future__ import annotations


class TaskClockError(Exception):
    pass


class StorageError(TaskClockError):
    """The task store could not be opened, written or read."""


class RowDecodeError(StorageError):
    def __init__(self, row_id: object, reason: str) -> None:
        super().__init__(f"cannot decode task row id={row_id!r}: {reason}")
        self.row_id = row_id
        self.reason = reason


class InvalidOperation(TaskClockError):
    """A caller asked for a transition that is not valid in the current state."""
