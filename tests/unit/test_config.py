import pytest
import yaml

from td.config import Settings, load_settings, td_dir
from td.core.errors import ValidationError
from td.core.models import SortKey
from td.store import JsonTaskStore, SqliteTaskStore, open_store


def test_td_home_override(tmp_td_dir):
    assert td_dir() == tmp_td_dir


def test_defaults_without_config(tmp_td_dir):
    settings = load_settings()
    assert settings.backend == "sqlite"
    assert settings.default_sort is SortKey.ID
    assert settings.db_path == tmp_td_dir / "todos.db"


def test_reads_config_yaml(tmp_td_dir):
    (tmp_td_dir / "config.yaml").write_text(
        yaml.dump({"backend": "json", "default_sort": "priority"})
    )
    settings = load_settings()
    assert settings.backend == "json"
    assert settings.default_sort is SortKey.PRIORITY
    assert settings.json_path == tmp_td_dir / "todo.json"


def test_unreadable_config_means_defaults(tmp_td_dir):
    (tmp_td_dir / "config.yaml").write_text("backend: [unclosed")
    assert load_settings().backend == "sqlite"


def test_non_utf8_config_means_defaults(tmp_td_dir):
    (tmp_td_dir / "config.yaml").write_bytes(b"backend: \xff\xfe json\n")
    settings = load_settings()
    assert settings.backend == "sqlite"
    assert settings.default_sort is SortKey.ID


def test_unknown_backend_rejected(tmp_td_dir):
    (tmp_td_dir / "config.yaml").write_text("backend: postgres\n")
    with pytest.raises(ValidationError):
        load_settings()


@pytest.mark.parametrize(("backend", "cls"), [("sqlite", SqliteTaskStore), ("json", JsonTaskStore)])
def test_open_store_picks_backend(tmp_path, backend, cls):
    with open_store(Settings(data_dir=tmp_path, backend=backend)) as store:
        assert isinstance(store, cls)
