"""Conditional DELETE service."""

from __future__ import annotations

from ..errors import DriverError, WildcardMutationError
from ..query_builder import WhereInput, compile_where, is_empty_where
from ..results import Result
from .base import TableService


class DeleteService(TableService):
    """Deletes rows matching a condition set."""

    def delete(self, conditions: WhereInput, *, allow_wildcard: bool = False) -> Result[bool]:
        """Delete matching rows.

        Args:
            conditions: Condition set selecting the rows.
            allow_wildcard: Required to delete with an empty condition set.

        Returns:
            `OK` when rows were deleted, `NOT_FOUND` when nothing matched,
            `DRIVER_ERROR` when the driver failed.

        Raises:
            WildcardMutationError: Empty condition set without `allow_wildcard`.
            InvalidConditionError: Unsafe column names in `conditions`.
        """

        try:
            count = self.delete_or_raise(conditions, allow_wildcard=allow_wildcard)
        except DriverError as exc:
            return self._driver_failure("delete", exc)
        if count == 0:
            return Result.not_found()
        return Result.success(True, rowcount=max(count, 0))

    def delete_or_raise(self, conditions: WhereInput, *, allow_wildcard: bool = False) -> int:
        if is_empty_where(conditions) and not allow_wildcard:
            raise WildcardMutationError(
                f"Refusing to delete every row of {self.config.table!r}; "
                "pass allow_wildcard=True to confirm."
            )
        where = compile_where(conditions, self.d)
        sql = f"DELETE FROM {self.table_sql}{where.sql};"
        cursor = self.db.execute(sql, where.params)
        return cursor.rowcount
