"""Application configuration loaded from environment variables."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

ENV_PREFIX = "PACKETJOURNEY_"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class Settings:
    """Typed settings for packetjourney."""

    data_dir: Path
    db_path: Path
    quests_dir: Optional[Path]
    api_url: Optional[str]
    log_level: str
    log_file: Optional[Path]

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return logging.getLevelName(self.log_level)


def _env(name: str) -> Optional[str]:
    value = os.environ.get(ENV_PREFIX + name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_log_level(raw: Optional[str]) -> str:
    level = (raw or "INFO").upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"{ENV_PREFIX}LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {raw!r}.")
    return level


def load_settings() -> Settings:
    """Build settings from the current environment."""
    data_dir_raw = _env("DATA_DIR")
    data_dir = Path(data_dir_raw).expanduser() if data_dir_raw else Path.home() / ".local" / "share" / "packetjourney"

    db_path_raw = _env("DB_PATH")
    db_path = Path(db_path_raw).expanduser() if db_path_raw else data_dir / "progress.db"

    quests_dir_raw = _env("QUESTS_DIR")
    log_file_raw = _env("LOG_FILE")
    api_url = _env("API_URL")

    return Settings(
        data_dir=data_dir,
        db_path=db_path,
        quests_dir=Path(quests_dir_raw).expanduser() if quests_dir_raw else None,
        api_url=api_url.rstrip("/") if api_url else None,
        log_level=_parse_log_level(_env("LOG_LEVEL")),
        log_file=Path(log_file_raw).expanduser() if log_file_raw else None,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings for the running process."""
    return load_settings()
