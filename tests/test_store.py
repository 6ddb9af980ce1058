from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from taskclock.domain.errors import RowDecodeError, StorageError
from taskclock.infra.store import EXAMPLE_TASKS, TaskStore


def _raw_execute(path: Path, sql: str, params: tuple = ()) -> None:
    conn = sqlite3.connect(path)
    try:
        conn.execute(sql, params)
        conn.commit()
    finally:
        conn.close()


def test_fresh_store_is_seeded_in_order(tmp_path: Path) -> None:
    store = TaskStore.open(tmp_path / "tasks.db")

    tasks = store.load_all()

    assert [task.description for task in tasks] == list(EXAMPLE_TASKS)
    assert [task.id for task in tasks] == list(range(1, 11))
    assert all(not task.completed for task in tasks)
    assert all(task.accumulated_seconds == 0 for task in tasks)
    assert all(task.timer is None for task in tasks)
    store.close()


def test_reopening_non_empty_store_does_not_seed_again(tmp_path: Path) -> None:
    path = tmp_path / "tasks.db"
    store = TaskStore.open(path)
    store.insert("Extra")
    store.close()

    reopened = TaskStore.open(path)

    assert reopened.count() == len(EXAMPLE_TASKS) + 1
    assert reopened.seed_if_empty() == 0
    reopened.close()


def test_seeding_can_be_disabled(tmp_path: Path) -> None:
    store = TaskStore.open(tmp_path / "tasks.db", seed=False)

    assert store.load_all() == []
    assert store.seed_if_empty() == len(EXAMPLE_TASKS)
    assert store.count() == len(EXAMPLE_TASKS)


def test_inserted_ids_increase_in_insertion_order(tmp_path: Path) -> None:
    store = TaskStore.open(tmp_path / "tasks.db", seed=False)

    ids = [store.insert(f"task {n}") for n in range(5)]
    loaded = store.load_all()

    assert [task.id for task in loaded] == ids
    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)
    assert [task.description for task in loaded] == [f"task {n}" for n in range(5)]


def test_new_rows_get_defaults(tmp_path: Path) -> None:
    store = TaskStore.open(tmp_path / "tasks.db", seed=False)
    _raw_execute(tmp_path / "tasks.db", "INSERT INTO tasks (description) VALUES (?)", ("raw",))

    (task,) = store.load_all()

    assert task.id == 1
    assert task.completed is False
    assert task.accumulated_seconds == 0


def test_deleted_ids_are_not_reused(tmp_path: Path) -> None:
    store = TaskStore.open(tmp_path / "tasks.db", seed=False)
    store.insert("first")
    second = store.insert("second")

    store.delete(second)
    third = store.insert("third")

    assert third > second
    assert second not in [task.id for task in store.load_all()]


def test_delete_missing_id_is_a_noop(tmp_path: Path) -> None:
    store = TaskStore.open(tmp_path / "tasks.db")

    store.delete(999)

    assert store.count() == len(EXAMPLE_TASKS)


def test_updates_are_persisted(tmp_path: Path) -> None:
    path = tmp_path / "tasks.db"
    store = TaskStore.open(path, seed=False)
    task_id = store.insert("Write report")

    store.update_completed(task_id, True)
    store.update_accumulated_seconds(task_id, 125)
    store.update_description(task_id, "Write the quarterly report")
    store.close()

    (task,) = TaskStore.open(path, seed=False).load_all()
    assert task.completed is True
    assert task.accumulated_seconds == 125
    assert task.description == "Write the quarterly report"


def test_updates_for_missing_id_are_noops(tmp_path: Path) -> None:
    store = TaskStore.open(tmp_path / "tasks.db", seed=False)
    task_id = store.insert("Only")

    store.update_completed(42, True)
    store.update_accumulated_seconds(42, 10)
    store.update_description(42, "Other")

    (task,) = store.load_all()
    assert task.id == task_id
    assert (task.description, task.completed, task.accumulated_seconds) == ("Only", False, 0)


def test_undecodable_rows_are_skipped_by_default(tmp_path: Path) -> None:
    path = tmp_path / "tasks.db"
    store = TaskStore.open(path, seed=False)
    store.insert("good")
    _raw_execute(
        path,
        "INSERT INTO tasks (description, accumulated_seconds) VALUES (?, ?)",
        ("bad time", "not a number"),
    )
    _raw_execute(path, "INSERT INTO tasks (description, completed) VALUES (?, NULL)", ("bad flag",))
    store.insert("also good")

    tasks = store.load_all()

    assert [task.description for task in tasks] == ["good", "also good"]


def test_strict_decoding_raises_on_bad_rows(tmp_path: Path) -> None:
    path = tmp_path / "tasks.db"
    TaskStore.open(path, seed=False).close()
    _raw_execute(
        path,
        "INSERT INTO tasks (description, accumulated_seconds) VALUES (?, ?)",
        ("negative", -5),
    )
    store = TaskStore.open(path, strict_decode=True, seed=False)

    with pytest.raises(RowDecodeError) as excinfo:
        store.load_all()

    assert isinstance(excinfo.value, StorageError)
    assert excinfo.value.row_id == 1


def test_open_fails_for_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(StorageError):
        TaskStore.open(tmp_path / "missing" / "tasks.db")


def test_open_fails_for_non_database_file(tmp_path: Path) -> None:
    path = tmp_path / "tasks.db"
    path.write_bytes(b"this is not a sqlite database" * 64)

    with pytest.raises(StorageError):
        TaskStore.open(path)


def test_open_fails_for_incompatible_schema(tmp_path: Path) -> None:
    path = tmp_path / "tasks.db"
    _raw_execute(path, "CREATE TABLE tasks (id INTEGER PRIMARY KEY, description TEXT)")

    with pytest.raises(StorageError, match="accumulated_seconds"):
        TaskStore.open(path)


def test_open_is_idempotent_on_existing_schema(tmp_path: Path) -> None:
    path = tmp_path / "tasks.db"
    TaskStore.open(path, seed=False).close()
    TaskStore.open(path, seed=False).close()

    conn = sqlite3.connect(path)
    try:
        columns = [row[1] for row in conn.execute("PRAGMA table_info(tasks)")]
    finally:
        conn.close()
    assert columns == ["id", "description", "completed", "accumulated_seconds"]
