"""Database layer for dayrec application."""

from dayrec.database.base import Database
from dayrec.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
