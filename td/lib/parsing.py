from td.core.errors import ValidationError

__all__ = ["parse_id", "parse_int"]


def parse_int(raw: str, what: str = "value") -> int:
    """Parse a CLI argument as an integer.

    Raises ValidationError if it is not one.
    """
    try:
        return int(raw.strip())
    except (AttributeError, ValueError):
        raise ValidationError(f"invalid {what} '{raw}': expected an integer") from None


def parse_id(raw: str) -> int:
    task_id = parse_int(raw, "id")
    if task_id < 1:
        raise ValidationError(f"invalid id '{raw}': ids start at 1")
    return task_id
