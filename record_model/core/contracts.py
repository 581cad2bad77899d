"""Core port contracts used by adapters and services."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, List, Optional, Protocol

from .types import MaybeRow, QueryParams, Record


class DialectPort(Protocol):
    """Dialect behavior required by query compilation and CRUD operations."""

    name: str
    paramstyle: str
    supports_returning: bool
    unbounded_limit: str
    like_escape_char: str
    begin_statement: str

    def q(self, ident: str) -> str: ...

    def placeholder(self, key: str) -> str: ...

    def returning_clause(self, pk_name: str) -> str: ...

    def get_lastrowid(self, cursor: Any) -> Optional[int]: ...

    def escape_like(self, keyword: str) -> str: ...

    def like_escape_clause(self) -> str: ...


class DatabasePort(Protocol):
    """Database adapter behavior required by the services.

    `execute`, `fetchone`, and `fetchall` raise `DriverError` for driver
    failures; `transaction` commits on success and rolls back on any
    exception.
    """

    dialect: DialectPort

    def transaction(self) -> AbstractContextManager[None]: ...

    def execute(self, sql: str, params: QueryParams = None) -> Any: ...

    def fetchone(self, sql: str, params: Any = None) -> MaybeRow: ...

    def fetchall(self, sql: str, params: Any = None) -> List[Record]: ...
