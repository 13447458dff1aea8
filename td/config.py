import dataclasses
import logging
import os
from pathlib import Path

import yaml

from .core.errors import ValidationError
from .core.models import SortKey

logger = logging.getLogger(__name__)

TD_HOME_ENV = "TD_HOME"
DEFAULT_DIR = Path.home() / ".td-cli"
DB_NAME = "todos.db"
JSON_NAME = "todo.json"
CONFIG_NAME = "config.yaml"

BACKENDS = ("sqlite", "json")


def td_dir() -> Path:
    override = os.environ.get(TD_HOME_ENV)
    return Path(override).expanduser() if override else DEFAULT_DIR


@dataclasses.dataclass(frozen=True)
class Settings:
    data_dir: Path
    backend: str = "sqlite"
    default_sort: SortKey = SortKey.ID

    @property
    def db_path(self) -> Path:
        return self.data_dir / DB_NAME

    @property
    def json_path(self) -> Path:
        return self.data_dir / JSON_NAME


def _read_config(path: Path) -> dict[str, object]:
    """Load config.yaml; missing or unreadable files mean defaults."""
    if not path.exists():
        return {}
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError):
        logger.warning("ignoring unreadable config %s", path, exc_info=True)
        return {}
    return data if isinstance(data, dict) else {}


def load_settings(data_dir: Path | None = None) -> Settings:
    data_dir = data_dir if data_dir else td_dir()
    raw = _read_config(data_dir / CONFIG_NAME)

    backend = str(raw.get("backend") or "sqlite").strip().lower()
    if backend not in BACKENDS:
        raise ValidationError(f"unknown backend '{backend}' in config (expected sqlite or json)")

    sort_val = raw.get("default_sort")
    default_sort = SortKey.parse(str(sort_val)) if sort_val else SortKey.ID

    return Settings(data_dir=data_dir, backend=backend, default_sort=default_sort)
