"""Database layer for cashdrawer application."""

from cashdrawer.database.base import Database
from cashdrawer.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
