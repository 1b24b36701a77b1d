# Application settings
"""
Settings are read from an optional config.json at the project root and can be
overridden with environment variables:

- ALGOFORGE_DB: SQLite database path
- ALGOFORGE_REPORTS_DIR: directory for generated practice reports
- ALGOFORGE_LOG_LEVEL: logging level name
"""
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.json"
DEFAULT_DB = Path("data/algoforge.db")
STORAGE_KEY = "algoforge-progress"


def _default_reports_dir() -> Path:
    return Path.home() / ".algoforge" / "reports"


@dataclass(frozen=True)
class Settings:
    db_path: Path = DEFAULT_DB
    storage_key: str = STORAGE_KEY
    reports_dir: Path = None  # type: ignore[assignment]
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.reports_dir is None:
            object.__setattr__(self, "reports_dir", _default_reports_dir())


def _load_config_file(path: Path) -> dict:
    """Load configuration from config.json."""
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_config(path: Optional[Path] = None) -> Settings:
    """Build Settings from config.json and environment overrides."""
    data = _load_config_file(path or DEFAULT_CONFIG_PATH)

    db_path = os.environ.get("ALGOFORGE_DB") or data.get("db_path") or DEFAULT_DB
    reports_dir = os.environ.get("ALGOFORGE_REPORTS_DIR") or data.get("reports_dir")
    log_level = os.environ.get("ALGOFORGE_LOG_LEVEL") or data.get("log_level") or "WARNING"

    return Settings(
        db_path=Path(db_path),
        storage_key=data.get("storage_key") or STORAGE_KEY,
        reports_dir=Path(reports_dir).expanduser() if reports_dir else None,
        log_level=str(log_level).upper(),
    )
