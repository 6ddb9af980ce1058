from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace

from taskclock.domain.entities import SessionStats, TaskRecord, TaskView
from taskclock.domain.errors import InvalidOperation, StorageError
from taskclock.domain.reorder import Point, Region, ReorderEngine
from taskclock.domain.timer import Clock, MonotonicClock
from taskclock.infra.store import TaskStore

from .notifier import TimerEvent, TimerEventKind

logger = logging.getLogger(__name__)

TimerObserver = Callable[[TimerEvent], None]


class TaskSession:
    """Ordered task list shared with the view, plus the gesture in progress.

    Every mutation is applied in memory first and then written to the store on
    a best-effort basis: storage failures are logged and the in-memory state
    stays authoritative. Calls that make no sense in the current state (pausing
    a stopped timer, committing an edit that was never started, ...) return
    ``False`` and change nothing.
    """

    def __init__(
        self,
        store: TaskStore,
        clock: Clock | None = None,
        observers: Iterable[TimerObserver] = (),
    ) -> None:
        self._store = store
        self.clock = clock or MonotonicClock()
        self._observers = list(observers)
        self._tasks: list[TaskRecord] = []
        self._reorder = ReorderEngine()
        self._editing_id: int | None = None
        self.edit_text = ""
        self.reload()

    # ---- read side ----

    @property
    def tasks(self) -> tuple[TaskRecord, ...]:
        # Copies: the live records stay private to the session.
        return tuple(replace(task) for task in self._tasks)

    def task_ids(self) -> list[int]:
        return [task.id for task in self._tasks]

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def drag_index(self) -> int | None:
        return self._reorder.drag_index

    @property
    def editing_index(self) -> int | None:
        if self._editing_id is None:
            return None
        return self.index_of(self._editing_id)

    def index_of(self, task_id: int) -> int | None:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        return None

    def is_dragging(self, index: int) -> bool:
        return self._reorder.drag_index == index

    def is_editing(self, index: int) -> bool:
        return self._editing_id is not None and self.editing_index == index

    def total_elapsed(self, index: int) -> int:
        return self._tasks[index].total_elapsed(self.clock)

    def snapshot(self) -> list[TaskView]:
        editing_index = self.editing_index
        return [
            TaskView(
                id=task.id,
                description=task.description,
                completed=task.completed,
                display_elapsed_seconds=task.total_elapsed(self.clock),
                timer_running=task.timer_running,
                dragging=self._reorder.drag_index == index,
                editing=editing_index == index,
            )
            for index, task in enumerate(self._tasks)
        ]

    def stats(self) -> SessionStats:
        completed = sum(1 for task in self._tasks if task.completed)
        return SessionStats(
            total=len(self._tasks),
            completed=completed,
            pending=len(self._tasks) - completed,
            total_seconds=sum(task.total_elapsed(self.clock) for task in self._tasks),
        )

    # ---- task operations ----

    def reload(self) -> bool:
        try:
            tasks = self._store.load_all()
            ok = True
        except StorageError:
            logger.exception("Loading tasks failed, showing an empty list")
            tasks = []
            ok = False
        running = {task.id: task.timer for task in self._tasks if task.timer_running}
        for task in tasks:
            task.timer = running.get(task.id)
        self._tasks = tasks
        self._reorder.release()
        self.cancel_edit()
        return ok

    def add(self, description: str) -> bool:
        if not description.strip():
            logger.debug("Ignoring empty task description")
            return False
        try:
            task_id = self._store.insert(description)
        except StorageError:
            logger.exception("Adding task failed")
            return False
        self._tasks.append(TaskRecord(id=task_id, description=description))
        return True

    def remove(self, index: int) -> bool:
        task = self._task_at(index)
        if task is None:
            return False
        try:
            self._store.delete(task.id)
        except StorageError:
            logger.exception("Deleting task id=%s failed, keeping it", task.id)
            return False

        dragged = self._dragged_task()
        del self._tasks[index]
        if dragged is not None:
            self._reorder.drag_index = self.index_of(dragged.id)
        if self._editing_id == task.id:
            self.cancel_edit()
        return True

    def toggle_completed(self, index: int) -> bool:
        task = self._task_at(index)
        if task is None:
            return False
        task.completed = not task.completed
        self._persist(self._store.update_completed, task.id, task.completed)
        return True

    # ---- edit gesture ----

    def begin_edit(self, index: int) -> bool:
        task = self._task_at(index)
        if task is None:
            return False
        self._editing_id = task.id
        self.edit_text = task.description
        return True

    def commit_edit(self, new_text: str | None = None) -> bool:
        if self._editing_id is None:
            logger.debug("No edit in progress")
            return False
        text = self.edit_text if new_text is None else new_text
        if not text.strip():
            logger.debug("Ignoring empty description for task id=%s", self._editing_id)
            return False
        index = self.index_of(self._editing_id)
        if index is None:
            self.cancel_edit()
            return False
        task = self._tasks[index]
        task.description = text
        self.cancel_edit()
        self._persist(self._store.update_description, task.id, text)
        return True

    def cancel_edit(self) -> None:
        self._editing_id = None
        self.edit_text = ""

    # ---- timers ----

    def start_timer(self, index: int) -> bool:
        task = self._task_at(index)
        if task is None:
            return False
        try:
            task.start_timer(self.clock)
        except InvalidOperation as exc:
            logger.debug("%s", exc)
            return False
        self._publish(TimerEventKind.STARTED, task)
        return True

    def pause_timer(self, index: int) -> bool:
        task = self._task_at(index)
        if task is None:
            return False
        try:
            total = task.pause_timer(self.clock)
        except InvalidOperation as exc:
            logger.debug("%s", exc)
            return False
        self._persist(self._store.update_accumulated_seconds, task.id, total)
        self._publish(TimerEventKind.PAUSED, task)
        return True

    def reset_timer(self, index: int) -> bool:
        task = self._task_at(index)
        if task is None:
            return False
        task.reset_timer()
        self._persist(self._store.update_accumulated_seconds, task.id, 0)
        self._publish(TimerEventKind.RESET, task)
        return True

    # ---- drag gesture ----

    def begin_drag(self, index: int) -> bool:
        try:
            return self._reorder.begin(index, len(self._tasks))
        except InvalidOperation as exc:
            logger.debug("%s", exc)
            return False

    def drag_frame(
        self,
        regions: Sequence[Region],
        pointer: Point | None,
        released: bool = False,
    ) -> bool:
        if not self._reorder.active:
            logger.debug("Drag frame without an active drag")
            return False
        moved = self._reorder.track(self._tasks, regions, pointer)
        if released:
            self.end_drag()
        return moved

    def end_drag(self) -> None:
        self._reorder.release()

    # ---- helpers ----

    def _task_at(self, index: int) -> TaskRecord | None:
        if not 0 <= index < len(self._tasks):
            logger.debug("No task at position %s", index)
            return None
        return self._tasks[index]

    def _dragged_task(self) -> TaskRecord | None:
        if self._reorder.drag_index is None:
            return None
        return self._tasks[self._reorder.drag_index]

    def _persist(self, write: Callable[..., None], task_id: int, value) -> None:
        try:
            write(task_id, value)
        except StorageError:
            logger.exception("Saving task id=%s failed, keeping the in-memory value", task_id)

    def _publish(self, kind: TimerEventKind, task: TaskRecord) -> None:
        event = TimerEvent(kind=kind, task_id=task.id, total_seconds=task.total_elapsed(self.clock))
        for observer in self._observers:
            try:
                observer(event)
            except Exception:  # noqa: BLE001
                logger.exception("Timer observer failed for %s", event)
