"""Generic table-bound record access over DB-API connections."""

import logging

from .core import (
    BulkEditReport,
    C,
    Condition,
    ConditionGroup,
    ConfigurationError,
    CreateService,
    DeleteService,
    DriverError,
    InvalidConditionError,
    NotCondition,
    OrderBy,
    Page,
    Pagination,
    RawCondition,
    ReadService,
    RecordModel,
    RecordModelError,
    Result,
    Status,
    TableConfig,
    UpdateService,
    WildcardMutationError,
)
from .ports import Database, Dialect, MySQLDialect, PostgresDialect, SQLiteDialect

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "BulkEditReport",
    "C",
    "Condition",
    "ConditionGroup",
    "ConfigurationError",
    "CreateService",
    "Database",
    "DeleteService",
    "Dialect",
    "DriverError",
    "InvalidConditionError",
    "MySQLDialect",
    "NotCondition",
    "OrderBy",
    "Page",
    "Pagination",
    "PostgresDialect",
    "RawCondition",
    "ReadService",
    "RecordModel",
    "RecordModelError",
    "Result",
    "SQLiteDialect",
    "Status",
    "TableConfig",
    "UpdateService",
    "WildcardMutationError",
]
