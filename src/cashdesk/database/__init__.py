"""Database layer for cashdesk application."""

from cashdesk.database.base import Database
from cashdesk.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
