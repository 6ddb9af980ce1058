from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import func, inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskclock.domain.entities import TaskRecord
from taskclock.domain.errors import RowDecodeError, StorageError

from .db import Base, create_sqlite_engine, make_session_factory
from .models import TASK_COLUMNS, TaskModel

logger = logging.getLogger(__name__)

EXAMPLE_TASKS = (
    "Comprar leche y pan en el supermercado",
    "Llamar al dentista para cita",
    "Revisar correo electrónico importante",
    "Hacer ejercicio 30 minutos",
    "Leer capítulo del libro",
    "Preparar presentación para reunión",
    "Pagar facturas del mes",
    "Organizar escritorio de trabajo",
    "Estudiar Rust y egui",
    "Backup de archivos importantes",
)


def _decode_row(row) -> TaskRecord:
    task_id, description, completed, seconds = row
    if not isinstance(task_id, int):
        raise RowDecodeError(task_id, "id is not an integer")
    if not isinstance(description, str):
        raise RowDecodeError(task_id, "description is not text")
    if not isinstance(completed, int):
        raise RowDecodeError(task_id, f"completed flag {completed!r} is not an integer")
    if not isinstance(seconds, int) or seconds < 0:
        raise RowDecodeError(task_id, f"accumulated time {seconds!r} is not a non-negative integer")
    return TaskRecord(
        id=task_id,
        description=description,
        completed=completed != 0,
        accumulated_seconds=seconds,
    )


class TaskStore:
    """SQLite-backed task rows.

    Row order is the table's natural id order; nothing about the display order
    is stored. ``strict_decode`` picks the policy for rows that cannot be turned
    into a ``TaskRecord``: skipped with a warning (default) or raised as
    ``RowDecodeError``.
    """

    def __init__(self, engine: Engine, strict_decode: bool = False) -> None:
        self._engine = engine
        self._sessions = make_session_factory(engine)
        self.strict_decode = strict_decode

    @classmethod
    def open(
        cls,
        path: str | Path,
        *,
        strict_decode: bool = False,
        seed: bool = True,
    ) -> TaskStore:
        engine = create_sqlite_engine(path)
        store = cls(engine, strict_decode=strict_decode)
        try:
            store._ensure_schema()
            if seed:
                store.seed_if_empty()
            total = store.count()
        except StorageError:
            engine.dispose()
            raise
        logger.info("Task store ready path=%s total=%s", path, total)
        return store

    def close(self) -> None:
        self._engine.dispose()

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        try:
            with self._sessions() as session:
                yield session
        except SQLAlchemyError as exc:
            raise StorageError(f"{action} failed: {exc}") from exc

    def _ensure_schema(self) -> None:
        try:
            Base.metadata.create_all(self._engine)
            columns = {column["name"] for column in inspect(self._engine).get_columns("tasks")}
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot open task store: {exc}") from exc
        missing = [name for name in TASK_COLUMNS if name not in columns]
        if missing:
            raise StorageError(f"tasks table is missing columns: {', '.join(missing)}")

    def count(self) -> int:
        with self._session("count") as session:
            return session.scalar(select(func.count()).select_from(TaskModel)) or 0

    def seed_if_empty(self) -> int:
        with self._session("seed") as session:
            total = session.scalar(select(func.count()).select_from(TaskModel)) or 0
            if total:
                return 0
            session.add_all(TaskModel(description=text) for text in EXAMPLE_TASKS)
            session.commit()
        logger.info("Seeded %s example tasks", len(EXAMPLE_TASKS))
        return len(EXAMPLE_TASKS)

    def load_all(self) -> list[TaskRecord]:
        stmt = select(
            TaskModel.id,
            TaskModel.description,
            TaskModel.completed,
            TaskModel.accumulated_seconds,
        ).order_by(TaskModel.id.asc())
        with self._session("load") as session:
            rows = session.execute(stmt).all()

        records: list[TaskRecord] = []
        for row in rows:
            try:
                records.append(_decode_row(row))
            except RowDecodeError as exc:
                if self.strict_decode:
                    raise
                logger.warning("Skipping task row: %s", exc)
        return records

    def insert(self, description: str) -> int:
        with self._session("insert") as session:
            task = TaskModel(description=description, completed=0, accumulated_seconds=0)
            session.add(task)
            session.commit()
            return task.id

    def delete(self, task_id: int) -> None:
        with self._session("delete") as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return
            session.delete(task)
            session.commit()

    def update_completed(self, task_id: int, completed: bool) -> None:
        self._update(task_id, completed=int(completed))

    def update_accumulated_seconds(self, task_id: int, seconds: int) -> None:
        self._update(task_id, accumulated_seconds=seconds)

    def update_description(self, task_id: int, new_description: str) -> None:
        self._update(task_id, description=new_description)

    def _update(self, task_id: int, **values) -> None:
        with self._session("update") as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return
            for key, value in values.items():
                setattr(task, key, value)
            session.commit()
