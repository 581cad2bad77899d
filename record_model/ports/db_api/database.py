"""DB-API adapter: runs statements, normalizes rows, wraps driver errors."""

from __future__ import annotations

import contextlib
import logging
from typing import Any, Callable, Iterator, Mapping, Optional, Tuple, Type, TypeVar

from ...core.errors import DriverError
from ...core.types import MaybeRow, QueryParams, Record, Rows
from .dialects import Dialect

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DRIVER_BASE_NAMES = frozenset({"Error", "DatabaseError", "InterfaceError"})


def is_driver_error(exc: BaseException) -> bool:
    """Return whether `exc` looks like a DB-API driver exception.

    PEP 249 drivers expose a module level `Error` class that every driver
    exception derives from; builtin exceptions never match. This name check
    is only the fallback for drivers whose connection does not publish its
    exception classes.
    """

    return any(
        cls.__module__ != "builtins" and cls.__name__ in _DRIVER_BASE_NAMES
        for cls in type(exc).__mro__
    )


def _connection_error_class(conn: Any) -> Optional[Type[BaseException]]:
    # PEP 249 optional extension: sqlite3, psycopg2 and PyMySQL connections
    # carry the driver's exception classes as attributes.
    error = getattr(conn, "Error", None)
    if isinstance(error, type) and issubclass(error, BaseException):
        return error
    return None


def as_record(cursor: Any, row: Any) -> Record:
    """Convert one driver row into a plain `dict`.

    Handles mapping rows, tuple rows (named through `cursor.description`),
    and row objects exposing `keys()` such as `sqlite3.Row`.
    """

    if isinstance(row, Mapping):
        return dict(row)
    if isinstance(row, (tuple, list)):
        description = getattr(cursor, "description", None)
        if not description:
            raise TypeError("Tuple row without cursor.description cannot be named.")
        return {column[0]: value for column, value in zip(description, row)}
    keys = getattr(row, "keys", None)
    if callable(keys):
        return {key: row[key] for key in keys()}
    raise TypeError(f"Unsupported row type: {type(row)}")


class Database:
    """Wraps a caller-owned DB-API connection.

    The adapter never opens or closes the connection. Every driver exception
    leaving `execute`, the fetch methods, or `transaction` is a `DriverError`
    whose `original` (and `__cause__`) is the driver's exception.

    Args:
        conn: Live DB-API connection object.
        dialect: Concrete SQL dialect instance.
        driver_errors: Exception class(es) treated as driver failures. Taken
            from `conn.Error` when omitted; drivers without it fall back to
            `is_driver_error`.
    """

    def __init__(
        self,
        conn: Any,
        dialect: Dialect,
        driver_errors: Type[BaseException] | Tuple[Type[BaseException], ...] | None = None,
    ):
        if conn is None:
            raise ValueError("Database requires a live DB-API connection.")
        self.conn = conn
        self.dialect = dialect
        self.driver_errors = driver_errors or _connection_error_class(conn)
        self._explicit_tx = False

    def is_driver_error(self, exc: BaseException) -> bool:
        if self.driver_errors is not None:
            return isinstance(exc, self.driver_errors)
        return is_driver_error(exc)

    def _driver_call(self, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except Exception as exc:
            if self.is_driver_error(exc):
                raise DriverError(str(exc), exc) from exc
            raise

    def _in_autocommit(self) -> bool:
        # psycopg, psycopg2, mysql.connector and sqlite3 (autocommit=True)
        # expose a boolean attribute; PyMySQL and MySQLdb a getter.
        if getattr(self.conn, "autocommit", None) is True:
            return True
        get_autocommit = getattr(self.conn, "get_autocommit", None)
        if callable(get_autocommit):
            return bool(get_autocommit())
        return False

    def _needs_explicit_begin(self) -> bool:
        if getattr(self.conn, "in_transaction", False):
            return False
        if self._in_autocommit():
            return True
        # sqlite3 with isolation_level=None never opens a transaction itself.
        if getattr(self.dialect, "name", "").lower() != "sqlite":
            return False
        return getattr(self.conn, "isolation_level", "") is None

    def _run_control(self, statement: str) -> None:
        logger.debug("SQL: %s", statement)
        self._driver_call(lambda: self.conn.cursor().execute(statement))

    @contextlib.contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit when the block finishes; roll back when anything escapes it.

        Connections in autocommit mode get an explicit `BEGIN` (or the
        dialect's equivalent) and are ended with `COMMIT`/`ROLLBACK`
        statements. A block nested inside such a transaction joins it.

        Raises:
            DriverError: If begin, commit, or a statement inside the block
                fails at the driver level.
        """

        if self._explicit_tx:
            yield
            return

        explicit = begun = False
        try:
            explicit = self._driver_call(self._needs_explicit_begin)
            if explicit:
                self._run_control(self.dialect.begin_statement)
                begun = self._explicit_tx = True
            yield
            if explicit:
                self._run_control("COMMIT")
            else:
                self.conn.commit()
        except BaseException as exc:
            if explicit:
                if begun:
                    self._rollback_after(exc, lambda: self.conn.cursor().execute("ROLLBACK"))
            else:
                self._rollback_after(exc, self.conn.rollback)
            if not isinstance(exc, DriverError) and self.is_driver_error(exc):
                raise DriverError(str(exc), exc) from exc
            raise
        finally:
            if begun:
                self._explicit_tx = False

    def _rollback_after(self, cause: BaseException, rollback: Callable[[], Any]) -> None:
        try:
            rollback()
        except Exception:
            logger.exception("rollback failed after %s", type(cause).__name__)

    def execute(self, sql: str, params: QueryParams = None) -> Any:
        """Run one statement and return its cursor."""

        logger.debug("SQL: %s | params: %d", sql, 0 if params is None else len(params))
        cursor = self._driver_call(self.conn.cursor)
        args = (sql,) if params is None else (sql, params)
        self._driver_call(lambda: cursor.execute(*args))
        return cursor

    def fetchone(self, sql: str, params: QueryParams = None) -> MaybeRow:
        cursor = self.execute(sql, params)
        row = self._driver_call(cursor.fetchone)
        return None if row is None else as_record(cursor, row)

    def fetchall(self, sql: str, params: QueryParams = None) -> Rows:
        cursor = self.execute(sql, params)
        return [as_record(cursor, row) for row in self._driver_call(cursor.fetchall)]
