from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from dayplanner.db import DB_PATH

MEMORY = ":memory:"


@dataclass(frozen=True)
class Settings:
    db_path: Path | str = DB_PATH
    week_start: int = 0  # 0 = Monday (ISO), 6 = Sunday
    log_level: str = "WARNING"

    @property
    def in_memory(self) -> bool:
        return self.db_path == MEMORY


def _week_start(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"DAYPLANNER_WEEK_START must be an integer, got {raw!r}") from None
    if not 0 <= value <= 6:
        raise ValueError(f"DAYPLANNER_WEEK_START must be between 0 and 6, got {value}")
    return value


def _log_level(raw: str) -> str:
    level = raw.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"DAYPLANNER_LOG_LEVEL is not a logging level: {raw!r}")
    return level


def load_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True))

    raw_db = os.environ.get("DAYPLANNER_DB", "")
    if raw_db == MEMORY:
        db_path: Path | str = MEMORY
    elif raw_db:
        db_path = Path(raw_db).expanduser()
    else:
        db_path = DB_PATH

    return Settings(
        db_path=db_path,
        week_start=_week_start(os.environ.get("DAYPLANNER_WEEK_START", "0")),
        log_level=_log_level(os.environ.get("DAYPLANNER_LOG_LEVEL", "WARNING")),
    )
