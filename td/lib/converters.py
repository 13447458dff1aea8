from datetime import date, datetime
from typing import Any, cast

from td.core.models import Task

TaskRow = tuple[object, ...]
TaskRecord = dict[str, Any]

TASK_FIELDS = (
    "id",
    "description",
    "date_added",
    "date_due",
    "date_completed",
    "completed",
    "priority",
)


def _parse_date(val) -> date | None:
    """Parse a stored date that may be an ISO string or numeric timestamp."""
    if isinstance(val, str) and val:
        return date.fromisoformat(val.split("T")[0])
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        return datetime.fromtimestamp(val).date()
    return None


def _format_date(val: date | None) -> str | None:
    return val.isoformat() if val is not None else None


def row_to_task(row: TaskRow) -> Task:
    """
    Converts a raw database row from the todos table into a Task object.
    Expected row format: (id, task, date_added, date_due, date_completed, completed, priority)
    """
    added = _parse_date(row[2])
    if added is None:
        raise ValueError(f"todo {row[0]} has no date_added")
    return Task(
        id=int(cast(int, row[0])),
        description=cast(str, row[1]) if row[1] is not None else "",
        date_added=added,
        date_due=_parse_date(row[3]),
        date_completed=_parse_date(row[4]),
        completed=bool(row[5]),
        priority=int(cast(int, row[6] or 0)),
    )


def task_to_record(task: Task) -> TaskRecord:
    """Serialise a Task into a JSON-ready object with the seven task fields."""
    return {
        "id": task.id,
        "description": task.description,
        "date_added": _format_date(task.date_added),
        "date_due": _format_date(task.date_due),
        "date_completed": _format_date(task.date_completed),
        "completed": task.completed,
        "priority": task.priority,
    }


def record_to_task(record: TaskRecord) -> Task:
    missing = [f for f in TASK_FIELDS if f not in record]
    if missing:
        raise ValueError(f"todo record missing fields: {', '.join(missing)}")
    added = _parse_date(record["date_added"])
    if added is None:
        raise ValueError(f"todo {record['id']} has no date_added")
    return Task(
        id=int(record["id"]),
        description=str(record["description"] or ""),
        date_added=added,
        date_due=_parse_date(record["date_due"]),
        date_completed=_parse_date(record["date_completed"]),
        completed=bool(record["completed"]),
        priority=int(record["priority"] or 0),
    )
