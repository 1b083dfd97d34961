"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from moneytrack.database.sqlalchemy_db import SQLAlchemyDatabase

IN_MEMORY = ":memory:"


def default_database_path() -> Path:
    """Return ~/.moneytrack/moneytrack.db."""
    return Path.home() / ".moneytrack" / "moneytrack.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks MONEYTRACK_DB_PATH
            and then falls back to ``default_database_path()``. ``~`` is expanded and
            missing parent directories are created. ":memory:" gives a throwaway
            in-memory database.

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("MONEYTRACK_DB_PATH")

    if database_path == IN_MEMORY:
        return SQLAlchemyDatabase("sqlite://")

    path = Path(database_path).expanduser() if database_path else default_database_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    database = SQLAlchemyDatabase(f"sqlite:///{path}")
    database.database_path = str(path)
    return database
