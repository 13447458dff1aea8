import dataclasses
from collections.abc import Callable, Iterable
from datetime import date
from enum import Enum

from .errors import ValidationError


@dataclasses.dataclass(frozen=True)
class Task:
    id: int
    description: str
    date_added: date
    date_due: date | None = None
    date_completed: date | None = None
    completed: bool = False
    priority: int = 0


@dataclasses.dataclass(frozen=True)
class TaskFilter:
    include_completed: bool = False
    completed_only: bool = False

    def matches(self, task: Task) -> bool:
        if self.completed_only:
            return task.completed
        return self.include_completed or not task.completed


def _by_id(task: Task) -> tuple[int]:
    return (task.id,)


def _by_due(task: Task) -> tuple[bool, int, int]:
    # undated tasks sort last
    ordinal = task.date_due.toordinal() if task.date_due else 0
    return (task.date_due is None, ordinal, task.id)


def _by_priority(task: Task) -> tuple[int, int]:
    return (-task.priority, task.id)


def _by_completed(task: Task) -> tuple[bool, int, int]:
    ordinal = task.date_completed.toordinal() if task.date_completed else 0
    return (task.date_completed is None, -ordinal, task.id)


class SortKey(Enum):
    ID = "id"
    DUE = "due"
    PRIORITY = "priority"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, name: str) -> "SortKey":
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(k.value for k in cls)
            raise ValidationError(f"unknown sort key '{name}' (expected one of: {choices})") from None

    @property
    def key(self) -> Callable[[Task], tuple]:
        return _SORT_KEYS[self]


_SORT_KEYS: dict[SortKey, Callable[[Task], tuple]] = {
    SortKey.ID: _by_id,
    SortKey.DUE: _by_due,
    SortKey.PRIORITY: _by_priority,
    SortKey.COMPLETED: _by_completed,
}


def sort_tasks(tasks: Iterable[Task], key: SortKey = SortKey.ID) -> list[Task]:
    return sorted(tasks, key=key.key)
