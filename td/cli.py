import sys
from pathlib import Path

import fncli
from fncli import UsageError

from .core.errors import TdError
from .lib.errors import exit_error
from .lib.log import setup_logging

_VERBOSE_FLAGS = ("-v", "--verbose")
_HELP_FLAGS = ("-h", "--help")
_TEXT_COMMANDS = ("add", "update")


def _dispatch_text(name: str, words: list[str]) -> int:
    """add/update take free text: dash-prefixed words belong to the description."""
    from .commands import add, update

    try:
        if name == "add":
            add(content=words)
        elif not words:
            raise UsageError("Usage: td update <id> <description>")
        else:
            update(words[0], content=words[1:])
    except UsageError as e:
        exit_error(f"Error: {e}")
    return 0


def main():
    user_args = sys.argv[1:]
    verbose = False
    while user_args and user_args[0] in _VERBOSE_FLAGS:
        verbose = True
        user_args = user_args[1:]
    setup_logging(verbose)

    fncli.autodiscover(Path(__file__).parent, "td")
    try:
        name, rest = (user_args[0], user_args[1:]) if user_args else ("list", [])
        if name in _TEXT_COMMANDS and not (rest and rest[0] in _HELP_FLAGS):
            code = _dispatch_text(name, rest)
        else:
            code = fncli.dispatch(["td", name, *rest])
    except TdError as e:
        exit_error(f"Error: {e}")
    sys.exit(code)


if __name__ == "__main__":
    main()
