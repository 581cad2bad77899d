"""Single-row UPDATE-by-id service."""

from __future__ import annotations

from typing import Any, Mapping

from ..errors import DriverError
from ..query_builder import ParamBinder, check_identifier, compile_where
from ..results import Result
from .base import TableService


class UpdateService(TableService):
    """Applies a partial field set to one row identified by primary key."""

    def update(self, record_id: Any, data: Mapping[str, Any]) -> Result[bool]:
        """Update the row whose primary key equals `record_id`.

        Returns:
            `OK` when a row changed, `NOT_FOUND` when no row matched,
            `INVALID` for a missing id or empty data, `DRIVER_ERROR` when
            the driver failed.

        Raises:
            InvalidConditionError: If a column name is unsafe.
        """

        if record_id is None:
            return Result.invalid(ValueError("Cannot UPDATE without an id."))
        if not data:
            return Result.invalid(ValueError("update data must not be empty."))
        try:
            count = self.update_or_raise(record_id, data)
        except DriverError as exc:
            return self._driver_failure("update", exc)
        if count == 0:
            return Result.not_found()
        return Result.success(True, rowcount=max(count, 0))

    def update_or_raise(self, record_id: Any, data: Mapping[str, Any]) -> int:
        """Run the UPDATE and return the driver row count.

        A negative count means the driver could not tell.
        """

        if not data:
            raise ValueError("update data must not be empty.")
        binder = ParamBinder(self.d)
        set_clause = ", ".join(
            f"{self.d.q(check_identifier(key))} = {binder.bind(f'set_{key}', value)}"
            for key, value in data.items()
        )
        where = compile_where({self.config.pk: record_id}, self.d, binder)
        sql = f"UPDATE {self.table_sql} SET {set_clause}{where.sql};"
        cursor = self.db.execute(sql, binder.result())
        return cursor.rowcount
