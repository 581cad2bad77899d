"""Public core API for condition mapping, services, and record models."""

from .bulk import BulkEditReport
from .conditions import (
    C,
    Condition,
    ConditionGroup,
    NotCondition,
    OrderBy,
    RawCondition,
    WhereExpression,
)
from .config import TableConfig
from .errors import (
    ConfigurationError,
    DriverError,
    InvalidConditionError,
    RecordModelError,
    WildcardMutationError,
)
from .pagination import Page, Pagination
from .query_builder import OrderInput, WhereInput, compile_order_by, compile_where
from .record_model import RecordModel
from .results import Result, Status
from .services import CreateService, DeleteService, ReadService, UpdateService

__all__ = [
    "BulkEditReport",
    "C",
    "Condition",
    "ConditionGroup",
    "ConfigurationError",
    "CreateService",
    "DeleteService",
    "DriverError",
    "InvalidConditionError",
    "NotCondition",
    "OrderBy",
    "OrderInput",
    "Page",
    "Pagination",
    "RawCondition",
    "ReadService",
    "RecordModel",
    "RecordModelError",
    "Result",
    "Status",
    "TableConfig",
    "UpdateService",
    "WhereExpression",
    "WhereInput",
    "WildcardMutationError",
    "compile_order_by",
    "compile_where",
]
