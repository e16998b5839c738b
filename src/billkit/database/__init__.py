"""Database layer for billkit application."""

from billkit.database.base import Database
from billkit.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
