import pytest

from td.core.errors import ValidationError
from td.lib.parsing import parse_id, parse_int


def test_parse_int():
    assert parse_int("5") == 5
    assert parse_int("-3", "priority") == -3


def test_parse_int_rejects_text():
    with pytest.raises(ValidationError, match="invalid priority 'high'"):
        parse_int("high", "priority")


@pytest.mark.parametrize("bad", ["0", "-1", "one", "1.5"])
def test_parse_id_rejects(bad):
    with pytest.raises(ValidationError):
        parse_id(bad)
