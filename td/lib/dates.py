import re
from datetime import date, datetime

from td.core.errors import ParseError

__all__ = ["DUE_FORMAT", "format_date", "parse_due_date"]

DUE_FORMAT = "%m-%d-%Y"

_DUE_RE = re.compile(r"^\d{2}-\d{2}-\d{4}$")


def parse_due_date(due_str: str) -> date:
    """Parse a due date given as MM-DD-YYYY.

    Only the exact zero-padded form is accepted. Raises ParseError otherwise.
    """
    raw = due_str.strip()
    if not _DUE_RE.match(raw):
        raise ParseError(f"invalid due date '{due_str}' (expected MM-DD-YYYY)")
    try:
        return datetime.strptime(raw, DUE_FORMAT).date()
    except ValueError:
        raise ParseError(f"invalid due date '{due_str}' (expected MM-DD-YYYY)") from None


def format_date(value: date | None, empty: str = "-") -> str:
    if value is None:
        return empty
    return value.strftime(DUE_FORMAT)
