import io
import sys
from contextlib import redirect_stderr, redirect_stdout
from dataclasses import dataclass
from datetime import date, datetime

import pytest

from td.lib import ansi, clock
from td.store import JsonTaskStore, SqliteTaskStore

TODAY = date(2024, 3, 15)


@dataclass
class Result:
    exit_code: int
    stdout: str
    stderr: str


class FnCLIRunner:
    """Runs `td` in-process, capturing output and exit status."""

    def invoke(self, args: list[str]) -> Result:
        from td.cli import main

        out, err = io.StringIO(), io.StringIO()
        argv = sys.argv
        sys.argv = ["td", *args]
        code = 0
        try:
            with redirect_stdout(out), redirect_stderr(err):
                main()
        except SystemExit as e:
            code = e.code if isinstance(e.code, int) else (0 if e.code is None else 1)
        finally:
            sys.argv = argv
        return Result(exit_code=code, stdout=out.getvalue(), stderr=err.getvalue())


@pytest.fixture(autouse=True)
def plain_output():
    ansi.use(ansi.PLAIN)
    yield
    ansi.use(ansi.PLAIN)


@pytest.fixture
def tmp_td_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("TD_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def fixed_clock(monkeypatch):
    """Pin clock.today(); tests may reassign .current to move time."""

    class _Clock:
        current = TODAY

    monkeypatch.setattr(clock, "now", lambda: datetime.combine(_Clock.current, datetime.min.time()))
    monkeypatch.setattr(clock, "today", lambda: _Clock.current)
    return _Clock


@pytest.fixture(params=["sqlite", "json"])
def backend(request):
    return request.param


def open_backend(backend: str, directory):
    if backend == "json":
        return JsonTaskStore(directory / "todo.json")
    return SqliteTaskStore(directory / "todos.db")


@pytest.fixture
def store(backend, tmp_path, fixed_clock):
    s = open_backend(backend, tmp_path)
    yield s
    s.close()
