"""Single-row INSERT service."""

from __future__ import annotations

from typing import Any, Mapping

from ..errors import DriverError
from ..query_builder import ParamBinder, check_identifier
from ..results import Result
from .base import TableService


class CreateService(TableService):
    """Inserts one record into the bound table."""

    def insert(self, data: Mapping[str, Any], return_id: bool = False) -> Result[Any]:
        """Insert `data` as one row.

        Args:
            data: Column -> value mapping. Every key becomes a column; nothing
                is defaulted.
            return_id: Return the generated primary key instead of `True`.

        Returns:
            `Result` whose value is `True` or the new id. Empty data gives
            an `INVALID` result; driver failures give `DRIVER_ERROR`.

        Raises:
            InvalidConditionError: If a column name is unsafe.
        """

        if not data:
            return Result.invalid(ValueError("insert data must not be empty."))
        try:
            new_id = self.insert_or_raise(data, return_id=return_id)
        except DriverError as exc:
            return self._driver_failure("insert", exc)
        return Result.success(new_id if return_id else True, rowcount=1)

    def insert_or_raise(self, data: Mapping[str, Any], *, return_id: bool = False) -> Any:
        """Insert `data` and let `DriverError` propagate."""

        if not data:
            raise ValueError("insert data must not be empty.")
        columns = [check_identifier(name) for name in data]
        binder = ParamBinder(self.d)
        column_sql = ", ".join(self.d.q(name) for name in columns)
        placeholders = ", ".join(binder.bind(name, data[name]) for name in columns)
        sql = f"INSERT INTO {self.table_sql} ({column_sql}) VALUES ({placeholders})"

        pk = self.config.pk
        if return_id and self.d.supports_returning:
            sql += self.d.returning_clause(pk) + ";"
            row = self.db.fetchone(sql, binder.result())
            return row.get(pk) if row else None

        cursor = self.db.execute(sql + ";", binder.result())
        if not return_id:
            return None
        return self.d.get_lastrowid(cursor)
