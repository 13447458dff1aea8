import os
import sys
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    green: str = "\033[38;5;114m"
    yellow: str = "\033[38;5;221m"
    coral: str = "\033[38;5;209m"
    muted: str = "\033[90m"  # dim gray for secondary text
    bold: str = "\033[1m"
    reset: str = "\033[0m"


DEFAULT = Theme()
PLAIN = Theme(**{f: "" for f in Theme.__dataclass_fields__})


def _enabled() -> bool:
    if os.environ.get("NO_COLOR") is not None:
        return False
    return sys.stdout.isatty()


_active: Theme = DEFAULT if _enabled() else PLAIN


def use(theme: Theme) -> None:
    global _active
    _active = theme


_COLORS = {"green", "yellow", "coral", "muted"}


def __getattr__(name: str) -> Callable[[str], str]:
    if name in _COLORS:

        def _wrap(text: str) -> str:
            return f"{getattr(_active, name)}{text}{_active.reset}"

        _wrap.__name__ = name
        return _wrap
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def bold(text: str) -> str:
    return f"{_active.bold}{text}{_active.reset}"
