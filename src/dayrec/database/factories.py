"""Database factory functions for creating database instances."""

from pathlib import Path
from typing import Optional

from dayrec.config import load_settings
from dayrec.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, uses the
            DAYREC_DB_PATH environment variable, then ~/.dayrec/dayrec.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = load_settings().database_path

    Path(database_path).expanduser().parent.mkdir(parents=True, exist_ok=True)

    database_url = f"sqlite:///{Path(database_path).expanduser()}"
    return SQLAlchemyDatabase(database_url)
