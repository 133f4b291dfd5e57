"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dayrec.domain.matching import DEFAULT_SETTLEMENT_DAYS

DB_PATH_ENV = "DAYREC_DB_PATH"
SETTLEMENT_DAYS_ENV = "DAYREC_SETTLEMENT_DAYS"
LOG_LEVEL_ENV = "DAYREC_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"


def default_database_path() -> str:
    """~/.dayrec/dayrec.db"""
    return str(Path.home() / ".dayrec" / "dayrec.db")


@dataclass(frozen=True)
class Settings:
    """Settings for one dayrec process."""

    database_path: str
    settlement_days: int = DEFAULT_SETTLEMENT_DAYS
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from environment variables.

    Args:
        environ: Mapping to read instead of os.environ

    Raises:
        ValueError: If DAYREC_SETTLEMENT_DAYS is not a non-negative integer
    """
    env = os.environ if environ is None else environ

    settlement_days = DEFAULT_SETTLEMENT_DAYS
    raw_days = env.get(SETTLEMENT_DAYS_ENV)
    if raw_days:
        try:
            settlement_days = int(raw_days)
        except ValueError:
            raise ValueError(f"{SETTLEMENT_DAYS_ENV} must be an integer, got '{raw_days}'")
        if settlement_days < 0:
            raise ValueError(f"{SETTLEMENT_DAYS_ENV} must not be negative, got {settlement_days}")

    return Settings(
        database_path=env.get(DB_PATH_ENV) or default_database_path(),
        settlement_days=settlement_days,
        log_level=(env.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper(),
    )
