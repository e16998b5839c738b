"""Database factory functions for creating database instances."""

import os
from typing import Optional

from billkit.config import default_database_path
from billkit.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks BILLKIT_DB_PATH
            environment variable, then defaults to ~/.billkit/billkit.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("BILLKIT_DB_PATH")

    if database_path is None:
        database_path = default_database_path()

    database_url = f"sqlite:///{database_path}"
    db = SQLAlchemyDatabase(database_url)
    db.database_path = database_path
    return db
