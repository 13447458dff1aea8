from fncli import UsageError, cli

from .config import Settings, load_settings
from .core.models import SortKey, Task, TaskFilter
from .lib.errors import echo
from .lib.format import DONE_MARK, format_status, render_completed, render_tasks
from .lib.parsing import parse_id, parse_int
from .store import TaskStore, open_store

__all__ = [
    "add",
    "complete",
    "delete",
    "due",
    "ls",
    "priority",
    "update",
]


def _open(settings: Settings | None = None) -> TaskStore:
    return open_store(settings or load_settings())


def _show_after(message: str, task: Task, store: TaskStore, settings: Settings) -> None:
    echo(format_status(message, task))
    echo()
    echo(render_tasks(store.list(TaskFilter(), settings.default_sort)))


@cli("td", flags={"content": []})
def add(content: list[str] | None = None) -> None:
    """Add a todo"""
    settings = load_settings()
    with _open(settings) as store:
        task = store.add(" ".join(content) if content else "")
        _show_after("+", task, store, settings)


@cli(
    "td",
    name="list",
    flags={"sort": ["-s", "--sort"], "completed": ["-c", "--completed"], "all_": ["-a", "--all"]},
)
def ls(sort: str | None = None, completed: bool = False, all_: bool = False) -> None:
    """List todos (--sort id|due|priority, --completed, --all)"""
    settings = load_settings()
    if completed and all_:
        raise UsageError("--completed and --all cannot be combined")
    if completed:
        key = SortKey.parse(sort) if sort else SortKey.COMPLETED
        with _open(settings) as store:
            echo(render_completed(store.list(TaskFilter(completed_only=True), key)))
        return
    key = SortKey.parse(sort) if sort else settings.default_sort
    with _open(settings) as store:
        echo(render_tasks(store.list(TaskFilter(include_completed=all_), key)))


@cli("td", flags={"content": []})
def update(ref: str, content: list[str] | None = None) -> None:
    """Replace a todo's description"""
    if not content:
        raise UsageError("Usage: td update <id> <description>")
    task_id = parse_id(ref)
    settings = load_settings()
    with _open(settings) as store:
        task = store.update(task_id, "description", " ".join(content))
        _show_after("~", task, store, settings)


@cli("td")
def delete(ref: str) -> None:
    """Delete a todo"""
    task_id = parse_id(ref)
    settings = load_settings()
    with _open(settings) as store:
        task = store.get(task_id)
        store.delete(task_id)
        _show_after("✗", task, store, settings)


@cli("td")
def complete(ref: str) -> None:
    """Mark a todo done"""
    task_id = parse_id(ref)
    settings = load_settings()
    with _open(settings) as store:
        task = store.complete(task_id)
        _show_after(DONE_MARK, task, store, settings)


@cli("td")
def priority(ref: str, value: str) -> None:
    """Set a todo's priority (higher first)"""
    task_id = parse_id(ref)
    level = parse_int(value, "priority")
    settings = load_settings()
    with _open(settings) as store:
        task = store.set_priority(task_id, level)
        _show_after(f"!{level}", task, store, settings)


@cli("td", flags={"when": [], "remove": ["-r", "--remove"]})
def due(ref: str, when: list[str] | None = None, remove: bool = False) -> None:
    """Set a todo's due date (MM-DD-YYYY), or clear it with -r"""
    task_id = parse_id(ref)
    if not remove and not when:
        raise UsageError("Usage: td due <id> <MM-DD-YYYY> | td due <id> -r")
    settings = load_settings()
    with _open(settings) as store:
        if remove:
            task = store.clear_due_date(task_id)
        else:
            task = store.set_due_date(task_id, " ".join(when or []))
        _show_after("◷", task, store, settings)
