from datetime import date

from td.core.models import Task
from td.lib.format import DONE_MARK, EMPTY_MESSAGE, render_completed, render_tasks


def test_render_empty():
    assert render_tasks([]) == EMPTY_MESSAGE
    assert render_completed([]) == EMPTY_MESSAGE


def test_render_tasks_columns(fixed_clock):
    tasks = [
        Task(id=1, description="buy milk", date_added=date(2024, 3, 1)),
        Task(id=12, description="file taxes", date_added=date(2024, 3, 1), date_due=date(2024, 4, 15), priority=3),
    ]
    lines = render_tasks(tasks).splitlines()
    assert lines[0].split() == ["ID", "Due", "Pri", "Task"]
    assert lines[1].split() == ["1", "-", "0", "buy", "milk"]
    assert lines[2].split() == ["12", "04-15-2024", "3", "file", "taxes"]


def test_render_completed_columns():
    tasks = [
        Task(
            id=4,
            description="ship it",
            date_added=date(2024, 3, 1),
            completed=True,
            date_completed=date(2024, 3, 9),
        )
    ]
    lines = render_completed(tasks).splitlines()
    assert lines[0].split() == ["ID", "Completed", "Task"]
    assert lines[1].split() == ["4", "03-09-2024", "ship", "it"]


def test_render_tasks_marks_completed(fixed_clock):
    tasks = [
        Task(id=1, description="open", date_added=date(2024, 3, 1)),
        Task(
            id=2,
            description="done",
            date_added=date(2024, 3, 1),
            date_due=date(2024, 3, 1),
            completed=True,
            date_completed=date(2024, 3, 2),
        ),
    ]
    lines = render_tasks(tasks).splitlines()
    assert lines[1].split() == ["1", "-", "0", "open"]
    assert lines[2].split() == ["2", "03-01-2024", "0", DONE_MARK, "done"]
