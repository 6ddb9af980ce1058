from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSizePolicy,
)

from taskclock.domain.entities import TaskView
from taskclock.domain.timer import format_elapsed


class DragHandle(QLabel):
    def __init__(self, on_press, on_move, on_release, parent=None):
        super().__init__("⣿", parent)
        self._on_press = on_press
        self._on_move = on_move
        self._on_release = on_release
        self.setObjectName("DragHandle")
        self.setCursor(Qt.OpenHandCursor)
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() == Qt.LeftButton:
            self.setCursor(Qt.ClosedHandCursor)
            self._on_press()
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        if event.buttons() & Qt.LeftButton:
            self._on_move(event.globalPosition().toPoint())
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        if event.button() == Qt.LeftButton:
            self.setCursor(Qt.OpenHandCursor)
            self._on_release(event.globalPosition().toPoint())
            event.accept()
            return
        super().mouseReleaseEvent(event)


class TaskRowWidget(QFrame):
    def __init__(self, view: TaskView, handlers, parent=None):
        super().__init__(parent)
        self.task_id = view.id
        self._handlers = handlers

        self.setObjectName("TaskRow")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(4)

        self.handle = DragHandle(
            lambda: handlers.on_drag_started(self.task_id),
            handlers.on_drag_moved,
            handlers.on_drag_released,
        )

        self.check = QCheckBox()
        self.check.clicked.connect(lambda: handlers.on_toggle(self.task_id))

        self.label = QLabel()
        self.label.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Preferred)

        self.editor = QLineEdit()
        self.editor.returnPressed.connect(self._save_edit)
        self.editor.textEdited.connect(handlers.on_edit_text_changed)

        self.save_button = QPushButton("💾")
        self.save_button.clicked.connect(self._save_edit)
        self.cancel_button = QPushButton("❌")
        self.cancel_button.clicked.connect(handlers.on_cancel_edit)

        self.elapsed_label = QLabel()
        self.elapsed_label.setObjectName("ElapsedLabel")

        self.timer_button = QPushButton()
        self.timer_button.clicked.connect(lambda: handlers.on_toggle_timer(self.task_id))

        self.reset_button = QPushButton("🔄")
        self.reset_button.setToolTip("Reiniciar tiempo")
        self.reset_button.clicked.connect(lambda: handlers.on_reset_timer(self.task_id))

        self.edit_button = QPushButton("✏️")
        self.edit_button.clicked.connect(lambda: handlers.on_begin_edit(self.task_id))

        self.delete_button = QPushButton("🗑")
        self.delete_button.setProperty("variant", "danger")
        self.delete_button.clicked.connect(lambda: handlers.on_remove(self.task_id))

        layout.addWidget(self.handle)
        layout.addWidget(self.save_button)
        layout.addWidget(self.cancel_button)
        layout.addWidget(self.editor, 1)
        layout.addWidget(self.check)
        layout.addWidget(self.label, 1)
        layout.addWidget(self.elapsed_label)
        layout.addWidget(self.timer_button)
        layout.addWidget(self.reset_button)
        layout.addWidget(self.edit_button)
        layout.addWidget(self.delete_button)

        self._editing: bool | None = None
        self.update_view(view)

    def update_view(self, view: TaskView, edit_text: str = "") -> None:
        if self._editing != view.editing:
            self._editing = view.editing
            self._set_edit_mode(view.editing, edit_text)

        self.check.setChecked(view.completed)
        self.label.setText(view.description)
        self.label.setToolTip(view.description)
        self.elapsed_label.setText(f"⏱ {format_elapsed(view.display_elapsed_seconds)}")
        self.timer_button.setText("⏸" if view.timer_running else "▶")

        state = "dragging" if view.dragging else "running" if view.timer_running else ""
        if self.property("state") != state:
            self.setProperty("state", state)
            self.style().unpolish(self)
            self.style().polish(self)

    def _set_edit_mode(self, editing: bool, edit_text: str) -> None:
        for widget in (self.save_button, self.cancel_button, self.editor):
            widget.setVisible(editing)
        for widget in (self.handle, self.check, self.label):
            widget.setVisible(not editing)
        if editing:
            self.editor.setText(edit_text)
            self.editor.setFocus()

    def _save_edit(self) -> None:
        self._handlers.on_commit_edit(self.editor.text())
