"""Read-side services: lookups, listings, pagination, search, and counts."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from typing import Any, Optional, Sequence

from ..errors import DriverError, InvalidConditionError
from ..pagination import Page, Pagination, page_offset, total_pages_for
from ..query_builder import (
    OrderInput,
    ParamBinder,
    WhereInput,
    append_limit_offset,
    check_identifier,
    compile_order_by,
    compile_where,
)
from ..results import Result
from ..types import QueryParams, Record, Rows
from .base import TableService


class ReadService(TableService):
    """Runs every SELECT the record model exposes.

    `order_by=None` means the table's default order; an empty string means
    no `ORDER BY` at all.
    """

    def find_by_id(self, record_id: Any) -> Result[Record]:
        """Fetch one row by primary key."""

        return self.fetch_one({self.config.pk: record_id})

    def find_all(
        self,
        conditions: WhereInput = None,
        order_by: OrderInput = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Result[Rows]:
        """List rows with optional filtering, sorting, and pagination.

        Args:
            conditions: Condition set (mapping or condition expressions).
            order_by: Ordering; validated against the sortable allow-list.
            limit: Optional max rows.
            offset: Rows to skip.

        Returns:
            `Result` holding the list of rows.
        """

        sql, params = self._select_sql(
            "*", conditions, order_by=order_by, limit=limit, offset=offset
        )
        try:
            rows = self.db.fetchall(sql + ";", params)
        except DriverError as exc:
            return self._driver_failure("select", exc)
        return Result.success(rows)

    def paginate(
        self,
        conditions: WhereInput = None,
        order_by: OrderInput = None,
        per_page: int = 10,
        current_page: int = 1,
    ) -> Result[Page]:
        """Return one page of rows and its pagination descriptor.

        The total comes from a fresh `COUNT(*)`; the slice from `find_all`
        with `limit=per_page` and `offset=(current_page - 1) * per_page`.

        Raises:
            ValueError: If `per_page < 1` or `current_page < 1`.
        """

        offset = page_offset(per_page, current_page)
        total = self.count(conditions)
        if not total:
            return total
        rows = self.find_all(conditions, order_by, limit=per_page, offset=offset)
        if not rows:
            return rows
        pagination = Pagination.compute(per_page, current_page, total.value or 0)
        return Result.success(Page(rows=rows.value or [], pagination=pagination))

    def fetch_all(self, conditions: WhereInput = None) -> Result[Rows]:
        """Return every matching row, unordered and unpaginated."""

        return self.find_all(conditions, order_by="")

    def total_pages(self, per_page: int = 10, conditions: WhereInput = None) -> Result[int]:
        """Return `ceil(count(conditions) / per_page)`."""

        if per_page < 1:
            raise ValueError("per_page must be a positive integer.")
        total = self.count(conditions)
        if not total:
            return total
        return Result.success(total_pages_for(total.value or 0, per_page))

    def fetch_one(self, conditions: WhereInput = None) -> Result[Record]:
        """Return the first row matching `conditions`."""

        sql, params = self._select_sql("*", conditions, order_by="", limit=1)
        try:
            row = self.db.fetchone(sql + ";", params)
        except DriverError as exc:
            return self._driver_failure("select", exc)
        if row is None:
            return Result.not_found()
        return Result.success(row)

    def fetch_raw(self, sql: str, params: Any = None) -> Result[Record]:
        """Run caller-supplied parameterized SQL and return its first row.

        `sql` must carry placeholders in the driver's param style; values
        are only ever passed through `params`.
        """

        if not isinstance(sql, str) or not sql.strip():
            raise InvalidConditionError("Raw SQL must be a non-empty string.")
        try:
            row = self.db.fetchone(sql, _raw_params(params))
        except DriverError as exc:
            return self._driver_failure("raw query", exc)
        if row is None:
            return Result.not_found()
        return Result.success(row)

    def search(
        self,
        column: str,
        keyword: str,
        order_by: OrderInput = None,
        limit: Optional[int] = 10,
    ) -> Result[Rows]:
        """Return rows whose `column` contains `keyword`.

        LIKE wildcards inside `keyword` match literally.

        Raises:
            InvalidConditionError: Unsafe column, or a column outside the
                configured searchable columns.
        """

        check_identifier(column)
        allowed = self.config.searchable_columns
        if allowed is not None and column not in allowed:
            raise InvalidConditionError(
                f"Column {column!r} is not searchable. "
                f"Allowed: {', '.join(sorted(allowed)) or '<none>'}"
            )

        binder = ParamBinder(self.d)
        pattern = f"%{self.d.escape_like(str(keyword))}%"
        where_sql = (
            f" WHERE {self.d.q(column)} LIKE {binder.bind(column, pattern)}"
            f"{self.d.like_escape_clause()}"
        )
        sql = f"SELECT * FROM {self.table_sql}{where_sql}"
        sql += self._order_sql(order_by)
        sql, params = append_limit_offset(
            sql, binder.result(), limit=limit, offset=None, dialect=self.d
        )
        try:
            rows = self.db.fetchall(sql + ";", params)
        except DriverError as exc:
            return self._driver_failure("search", exc)
        return Result.success(rows)

    def count(self, conditions: WhereInput = None) -> Result[int]:
        """Count rows matching optional conditions."""

        where = compile_where(conditions, self.d)
        sql = f'SELECT COUNT(*) AS "__count" FROM {self.table_sql}{where.sql};'
        try:
            row = self.db.fetchone(sql, where.params)
        except DriverError as exc:
            return self._driver_failure("count", exc)
        if not row:
            return Result.success(0)
        return Result.success(int(row["__count"]))

    def exists(self, conditions: WhereInput = None) -> Result[bool]:
        """Return whether at least one row matches optional conditions."""

        where = compile_where(conditions, self.d)
        sql = f"SELECT 1 FROM {self.table_sql}{where.sql} LIMIT 1;"
        try:
            row = self.db.fetchone(sql, where.params)
        except DriverError as exc:
            return self._driver_failure("exists", exc)
        return Result.success(row is not None)

    def _order_sql(self, order_by: OrderInput) -> str:
        if order_by is None:
            order_by = self.config.default_order
        return compile_order_by(order_by, self.d, allowed=self.config.sort_allow_list())

    def _select_sql(
        self,
        columns: str,
        conditions: WhereInput,
        *,
        order_by: OrderInput,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> tuple[str, QueryParams]:
        where = compile_where(conditions, self.d)
        sql = f"SELECT {columns} FROM {self.table_sql}{where.sql}"
        sql += self._order_sql(order_by)
        return append_limit_offset(
            sql, where.params, limit=limit, offset=offset, dialect=self.d
        )


def _raw_params(params: Any) -> QueryParams:
    if params is None:
        return None
    if isinstance(params, MappingABC):
        return dict(params)
    if isinstance(params, (str, bytes)) or not isinstance(params, Sequence):
        raise InvalidConditionError("Raw SQL params must be a mapping or a sequence.")
    return list(params)
