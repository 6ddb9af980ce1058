from __future__ import annotations

from PySide6.QtCore import QPoint, QTimer, Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from taskclock.config import SETTINGS
from taskclock.domain.reorder import Point, Region
from taskclock.domain.timer import format_elapsed
from taskclock.services.session import TaskSession

from .widgets import TaskRowWidget

HEADING = "📋 Lista de Tareas"

WINDOW_WIDTH = 500
WINDOW_MIN_SIZE = (400, 300)
WINDOW_MAX_SIZE = (1000, 1000)

# Approximate heights used to size the window for the initial task count.
HEADER_HEIGHT = 43
STATS_HEIGHT = 72
TASK_HEIGHT = 46
MARGIN_HEIGHT = 90


def needed_height(task_count: int) -> int:
    height = HEADER_HEIGHT + task_count * TASK_HEIGHT + STATS_HEIGHT + MARGIN_HEIGHT
    return max(WINDOW_MIN_SIZE[1], min(height, WINDOW_MAX_SIZE[1]))


class MainWindow(QWidget):
    def __init__(self, session: TaskSession):
        super().__init__()
        self.session = session
        self.setWindowTitle(HEADING)
        self.setMinimumSize(*WINDOW_MIN_SIZE)
        self.setMaximumSize(*WINDOW_MAX_SIZE)
        self.resize(WINDOW_WIDTH, needed_height(len(session)))

        self._rows: dict[int, TaskRowWidget] = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)

        title = QLabel(HEADING)
        title.setProperty("class", "panel-title")
        layout.addWidget(title)
        layout.addWidget(self._build_add_row())

        self.rows_container = QWidget()
        self.rows_layout = QVBoxLayout(self.rows_container)
        self.rows_layout.setContentsMargins(0, 0, 0, 0)
        self.rows_layout.setSpacing(3)
        self.rows_layout.addStretch()

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        scroll.setWidget(self.rows_container)
        layout.addWidget(scroll, 1)

        layout.addWidget(self._build_stats())

        self.frame_timer = QTimer(self)
        self.frame_timer.setInterval(SETTINGS.refresh_interval_ms)
        self.frame_timer.timeout.connect(self.refresh_frame)
        self.frame_timer.start()

        QShortcut(QKeySequence("Ctrl+N"), self, self.new_task_input.setFocus)
        QShortcut(QKeySequence("Ctrl+R"), self, self.reload_tasks)
        QShortcut(QKeySequence("Escape"), self, self.on_cancel_edit)

        self.rebuild_rows()

    def _build_add_row(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("AddTaskBar")
        row = QHBoxLayout(frame)
        row.setContentsMargins(0, 0, 0, 0)

        self.new_task_input = QLineEdit()
        self.new_task_input.setPlaceholderText("Nueva tarea")
        self.new_task_input.returnPressed.connect(self.add_task)

        add_button = QPushButton("➕ Agregar")
        add_button.clicked.connect(self.add_task)

        row.addWidget(QLabel("Nueva tarea:"))
        row.addWidget(self.new_task_input, 1)
        row.addWidget(add_button)
        return frame

    def _build_stats(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("StatsPanel")
        column = QVBoxLayout(frame)
        column.setContentsMargins(0, 6, 0, 0)
        column.setSpacing(2)

        self.total_label = QLabel()
        self.completed_label = QLabel()
        self.pending_label = QLabel()
        self.time_label = QLabel()

        reload_button = QPushButton("🔄 Recargar tareas")
        reload_button.setProperty("variant", "secondary")
        reload_button.clicked.connect(self.reload_tasks)

        for widget in (
            self.total_label,
            self.completed_label,
            self.pending_label,
            self.time_label,
            reload_button,
        ):
            column.addWidget(widget)
        return frame

    # ---- rendering ----

    def rebuild_rows(self) -> None:
        views = self.session.snapshot()
        live_ids = {view.id for view in views}
        for task_id in list(self._rows):
            if task_id not in live_ids:
                widget = self._rows.pop(task_id)
                self.rows_layout.removeWidget(widget)
                widget.deleteLater()
        for view in views:
            if view.id not in self._rows:
                self._rows[view.id] = TaskRowWidget(view, self)
        self._sync_row_order()
        self.refresh_frame()

    def _sync_row_order(self) -> None:
        for position, task_id in enumerate(self.session.task_ids()):
            widget = self._rows[task_id]
            if self.rows_layout.indexOf(widget) != position:
                self.rows_layout.removeWidget(widget)
                self.rows_layout.insertWidget(position, widget)
        self.rows_layout.activate()

    def refresh_frame(self) -> None:
        edit_text = self.session.edit_text
        for view in self.session.snapshot():
            row = self._rows.get(view.id)
            if row is not None:
                row.update_view(view, edit_text)

        stats = self.session.stats()
        self.total_label.setText(f"📊 Total: {stats.total}")
        self.completed_label.setText(f"✅ Completadas: {stats.completed}")
        self.pending_label.setText(f"⏳ Pendientes: {stats.pending}")
        self.time_label.setText(f"⏱️ Tiempo total: {format_elapsed(stats.total_seconds)}")

    def _row_regions(self) -> list[Region]:
        regions = []
        for task_id in self.session.task_ids():
            geometry = self._rows[task_id].geometry()
            regions.append(
                Region(geometry.x(), geometry.y(), geometry.width(), geometry.height())
            )
        return regions

    def _pointer(self, global_pos: QPoint) -> Point:
        local = self.rows_container.mapFromGlobal(global_pos)
        return Point(local.x(), local.y())

    # ---- actions ----

    def add_task(self) -> None:
        text = self.new_task_input.text()
        if not text.strip():
            return
        if self.session.add(text):
            self.new_task_input.clear()
            self.rebuild_rows()

    def reload_tasks(self) -> None:
        self.session.reload()
        self.rebuild_rows()

    def _index(self, task_id: int) -> int | None:
        return self.session.index_of(task_id)

    def on_toggle(self, task_id: int) -> None:
        index = self._index(task_id)
        if index is not None:
            self.session.toggle_completed(index)
        self.refresh_frame()

    def on_toggle_timer(self, task_id: int) -> None:
        index = self._index(task_id)
        if index is None:
            return
        if self.session.snapshot()[index].timer_running:
            self.session.pause_timer(index)
        else:
            self.session.start_timer(index)
        self.refresh_frame()

    def on_reset_timer(self, task_id: int) -> None:
        index = self._index(task_id)
        if index is not None:
            self.session.reset_timer(index)
        self.refresh_frame()

    def on_remove(self, task_id: int) -> None:
        index = self._index(task_id)
        if index is not None and self.session.remove(index):
            self.rebuild_rows()

    def on_begin_edit(self, task_id: int) -> None:
        index = self._index(task_id)
        if index is not None:
            self.session.begin_edit(index)
        self.refresh_frame()

    def on_edit_text_changed(self, text: str) -> None:
        self.session.edit_text = text

    def on_commit_edit(self, text: str) -> None:
        self.session.commit_edit(text)
        self.refresh_frame()

    def on_cancel_edit(self) -> None:
        self.session.cancel_edit()
        self.refresh_frame()

    def on_drag_started(self, task_id: int) -> None:
        index = self._index(task_id)
        if index is not None:
            self.session.begin_drag(index)
        self.refresh_frame()

    def on_drag_moved(self, global_pos: QPoint) -> None:
        if self.session.drag_frame(self._row_regions(), self._pointer(global_pos)):
            self._sync_row_order()
        self.refresh_frame()

    def on_drag_released(self, global_pos: QPoint) -> None:
        if self.session.drag_frame(self._row_regions(), self._pointer(global_pos), released=True):
            self._sync_row_order()
        self.session.end_drag()
        self.refresh_frame()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.frame_timer.stop()
        super().closeEvent(event)
