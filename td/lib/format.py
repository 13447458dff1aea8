from collections.abc import Sequence

from td.core.models import Task

from . import ansi, clock
from .dates import format_date

__all__ = [
    "DONE_MARK",
    "EMPTY_MESSAGE",
    "format_due",
    "format_status",
    "render_completed",
    "render_tasks",
]

EMPTY_MESSAGE = "No todos in todo list"
DONE_MARK = "\u2713"

_ID_W = 5
_DATE_W = 12
_PRI_W = 5


def format_due(task: Task) -> str:
    """Due date as MM-DD-YYYY; overdue dates in coral, missing as '-'."""
    text = format_date(task.date_due).ljust(_DATE_W)
    if task.date_due is None:
        return ansi.muted(text)
    if not task.completed and task.date_due < clock.today():
        return ansi.coral(text)
    return text


def format_status(symbol: str, task: Task) -> str:
    return f"{symbol} {task.description} {ansi.muted(f'[{task.id}]')}"


def render_tasks(tasks: Sequence[Task]) -> str:
    if not tasks:
        return EMPTY_MESSAGE
    header = f"{'ID':<{_ID_W}}{'Due':<{_DATE_W}}{'Pri':<{_PRI_W}}Task"
    lines = [ansi.bold(header)]
    for t in tasks:
        pri = str(t.priority).ljust(_PRI_W)
        if t.priority > 0:
            pri = ansi.yellow(pri)
        desc = ansi.muted(f"{DONE_MARK} {t.description}") if t.completed else t.description
        lines.append(f"{str(t.id):<{_ID_W}}{format_due(t)}{pri}{desc}")
    return "\n".join(lines)


def render_completed(tasks: Sequence[Task]) -> str:
    if not tasks:
        return EMPTY_MESSAGE
    header = f"{'ID':<{_ID_W}}{'Completed':<{_DATE_W}}Task"
    lines = [ansi.bold(header)]
    for t in tasks:
        done = format_date(t.date_completed).ljust(_DATE_W)
        lines.append(f"{str(t.id):<{_ID_W}}{ansi.green(done)}{t.description}")
    return "\n".join(lines)
