"""DB-API adapter and dialect exports."""

from .database import Database, is_driver_error
from .dialects import Dialect, MySQLDialect, PostgresDialect, SQLiteDialect

__all__ = [
    "Database",
    "Dialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "is_driver_error",
]
