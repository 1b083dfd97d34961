"""Storage layer: the abstract Database and its SQLite implementation."""

from moneytrack.database.base import COLLECTIONS, Database
from moneytrack.database.factories import create_sqlite_database, default_database_path
from moneytrack.database.sqlalchemy_db import SQLAlchemyDatabase

__all__ = [
    "COLLECTIONS",
    "Database",
    "SQLAlchemyDatabase",
    "create_sqlite_database",
    "default_database_path",
]
