import dataclasses
import json
import logging
import os
import sqlite3
from datetime import date
from pathlib import Path
from typing import Any

from . import db
from .config import Settings
from .core.errors import NotFoundError, StorageError, ValidationError
from .core.models import SortKey, Task, TaskFilter, sort_tasks
from .lib import clock
from .lib.converters import record_to_task, row_to_task, task_to_record
from .lib.dates import parse_due_date

__all__ = [
    "MUTABLE_FIELDS",
    "JsonTaskStore",
    "SqliteTaskStore",
    "TaskStore",
    "open_store",
]

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = ("description", "priority", "date_due")


def _coerce_field(field: str, value: Any) -> Any:
    if field not in MUTABLE_FIELDS:
        raise ValidationError(
            f"field '{field}' cannot be updated (expected one of: {', '.join(MUTABLE_FIELDS)})"
        )
    if field == "description":
        if not isinstance(value, str):
            raise ValidationError("description must be text")
        return value
    if field == "priority":
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"priority must be an integer, got {value!r}")
        return value
    if value is not None and not isinstance(value, date):
        raise ValidationError(f"date_due must be a date or None, got {value!r}")
    return value


class TaskStore:
    """Durable collection of tasks addressed by stable id.

    Backends implement add/get/list/update/delete/complete; priority and due
    date setters are expressed through update so every backend validates the
    same way. Stores are context managers and must be closed.
    """

    path: Path

    def __enter__(self) -> "TaskStore":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        raise NotImplementedError

    def add(self, description: str) -> Task:
        raise NotImplementedError

    def get(self, task_id: int) -> Task:
        raise NotImplementedError

    def list(self, filter: TaskFilter | None = None, sort: SortKey = SortKey.ID) -> list[Task]:
        raise NotImplementedError

    def update(self, task_id: int, field: str, value: Any) -> Task:
        raise NotImplementedError

    def delete(self, task_id: int) -> int:
        raise NotImplementedError

    def complete(self, task_id: int) -> Task:
        raise NotImplementedError

    def set_priority(self, task_id: int, priority: int) -> Task:
        return self.update(task_id, "priority", priority)

    def set_due_date(self, task_id: int, due: str) -> Task:
        return self.update(task_id, "date_due", parse_due_date(due))

    def clear_due_date(self, task_id: int) -> Task:
        return self.update(task_id, "date_due", None)

    def count(self, filter: TaskFilter | None = None) -> int:
        return len(self.list(filter))


# ── sqlite ───────────────────────────────────────────────────────────────────

_COLUMNS = {"description": "task", "priority": "priority", "date_due": "date_due"}


def _where(filter: TaskFilter) -> str:
    if filter.completed_only:
        return "completed = 1"
    if filter.include_completed:
        return "1 = 1"
    return "completed = 0"


class SqliteTaskStore(TaskStore):
    def __init__(self, path: Path):
        self.path = Path(path)
        self._conn: sqlite3.Connection | None = db.connect(self.path)
        try:
            db.init(self._conn)
        except StorageError:
            self.close()
            raise
        logger.debug("opened sqlite store %s", self.path)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("closed sqlite store %s", self.path)

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError(f"store {self.path} is closed")
        return self._conn

    def _fetch(self, where: str, params: tuple[object, ...] = ()) -> list[Task]:
        try:
            rows = self.conn.execute(
                f"SELECT {db.TODO_COLS} FROM todos WHERE {where}",  # noqa: S608
                params,
            ).fetchall()
            return [row_to_task(row) for row in rows]
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        except ValueError as e:
            raise StorageError(f"malformed todo in {self.path}: {e}") from e

    def add(self, description: str) -> Task:
        with db.transaction(self.conn) as conn:
            cursor = conn.execute(
                "INSERT INTO todos (task, date_added, completed, priority) VALUES (?, ?, 0, 0)",
                (description, clock.today().isoformat()),
            )
            task_id = cursor.lastrowid
        if task_id is None:
            raise StorageError("sqlite did not return an id for the new todo")
        logger.debug("added todo %s", task_id)
        return self.get(task_id)

    def get(self, task_id: int) -> Task:
        tasks = self._fetch("id = ?", (task_id,))
        if not tasks:
            raise NotFoundError(task_id)
        return tasks[0]

    def list(self, filter: TaskFilter | None = None, sort: SortKey = SortKey.ID) -> list[Task]:
        return sort_tasks(self._fetch(_where(filter or TaskFilter())), sort)

    def update(self, task_id: int, field: str, value: Any) -> Task:
        value = _coerce_field(field, value)
        if isinstance(value, date):
            value = value.isoformat()
        with db.transaction(self.conn) as conn:
            cursor = conn.execute(
                f"UPDATE todos SET {_COLUMNS[field]} = ? WHERE id = ?",  # noqa: S608
                (value, task_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(task_id)
        logger.debug("updated todo %s: %s=%r", task_id, field, value)
        return self.get(task_id)

    def delete(self, task_id: int) -> int:
        with db.transaction(self.conn) as conn:
            removed = conn.execute("DELETE FROM todos WHERE id = ?", (task_id,)).rowcount
            if removed == 0:
                raise NotFoundError(task_id)
        logger.debug("deleted todo %s", task_id)
        return removed

    def complete(self, task_id: int) -> Task:
        with db.transaction(self.conn) as conn:
            cursor = conn.execute(
                "UPDATE todos SET completed = 1, date_completed = ? WHERE id = ?",
                (clock.today().isoformat(), task_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(task_id)
        logger.debug("completed todo %s", task_id)
        return self.get(task_id)


# ── json ─────────────────────────────────────────────────────────────────────


class JsonTaskStore(TaskStore):
    """Flat-file store: one JSON array, rewritten wholesale on every mutation.

    The highest id ever issued lives in a `<name>.seq` file beside the array,
    so ids of deleted tasks are never handed out again. The in-memory
    collection is only replaced after the new document has been written, so a
    failed write leaves both disk and memory untouched.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.seq_path = self.path.with_name(self.path.name + ".seq")
        self._tasks: dict[int, Task] | None = self._load()
        self._last_id = max(self._load_seq(), max(self._tasks, default=0))
        logger.debug("opened json store %s (%d todos)", self.path, len(self._tasks))

    def _load(self) -> dict[int, Task]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text("utf-8") or "[]")
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageError(f"cannot read {self.path}: {e}") from e
        if not isinstance(data, list):
            raise StorageError(f"{self.path} is not a JSON array")
        try:
            tasks = [record_to_task(record) for record in data]
        except (TypeError, ValueError) as e:
            raise StorageError(f"malformed todo in {self.path}: {e}") from e
        return {t.id: t for t in tasks}

    def _load_seq(self) -> int:
        if not self.seq_path.exists():
            return 0
        try:
            return int(self.seq_path.read_text("utf-8").strip() or 0)
        except (OSError, ValueError) as e:
            raise StorageError(f"cannot read {self.seq_path}: {e}") from e

    def _write(self, target: Path, payload: str) -> None:
        tmp = target.with_name(target.name + ".tmp")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload + "\n", "utf-8")
            os.replace(tmp, target)
        except OSError as e:
            logger.error("failed to write %s: %s", target, e)
            raise StorageError(f"cannot write {target}: {e}") from e

    def _commit(self, tasks: dict[int, Task]) -> None:
        self._write(self.path, json.dumps([task_to_record(t) for t in tasks.values()], indent=2))
        self._tasks = tasks

    @property
    def tasks(self) -> dict[int, Task]:
        if self._tasks is None:
            raise StorageError(f"store {self.path} is closed")
        return self._tasks

    def close(self) -> None:
        if self._tasks is not None:
            self._tasks = None
            logger.debug("closed json store %s", self.path)

    def _issue_id(self) -> int:
        # the mark is bumped before the document is written; a failed write skips an id
        task_id = max(self._last_id, max(self.tasks, default=0)) + 1
        self._write(self.seq_path, str(task_id))
        self._last_id = task_id
        return task_id

    def _replace(self, task_id: int, **changes: Any) -> Task:
        current = self.get(task_id)
        updated = dataclasses.replace(current, **changes)
        tasks = dict(self.tasks)
        tasks[task_id] = updated
        self._commit(tasks)
        return updated

    def add(self, description: str) -> Task:
        task = Task(id=self._issue_id(), description=description, date_added=clock.today())
        tasks = dict(self.tasks)
        tasks[task.id] = task
        self._commit(tasks)
        logger.debug("added todo %s", task.id)
        return task

    def get(self, task_id: int) -> Task:
        task = self.tasks.get(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    def list(self, filter: TaskFilter | None = None, sort: SortKey = SortKey.ID) -> list[Task]:
        filter = filter or TaskFilter()
        return sort_tasks((t for t in self.tasks.values() if filter.matches(t)), sort)

    def update(self, task_id: int, field: str, value: Any) -> Task:
        value = _coerce_field(field, value)
        updated = self._replace(task_id, **{field: value})
        logger.debug("updated todo %s: %s=%r", task_id, field, value)
        return updated

    def delete(self, task_id: int) -> int:
        self.get(task_id)
        tasks = {tid: t for tid, t in self.tasks.items() if tid != task_id}
        self._commit(tasks)
        logger.debug("deleted todo %s", task_id)
        return 1

    def complete(self, task_id: int) -> Task:
        updated = self._replace(task_id, completed=True, date_completed=clock.today())
        logger.debug("completed todo %s", task_id)
        return updated


def open_store(settings: Settings) -> TaskStore:
    if settings.backend == "json":
        return JsonTaskStore(settings.json_path)
    return SqliteTaskStore(settings.db_path)
