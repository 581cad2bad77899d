"""Table-bound record model exposing CRUD, read, and bulk operations."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from . import bulk
from .config import TableConfig
from .contracts import DatabasePort
from .errors import ConfigurationError
from .pagination import Page, Pagination
from .query_builder import OrderInput, WhereInput
from .services import CreateService, DeleteService, ReadService, UpdateService
from .types import MaybeRow, Rows


class RecordModel:
    """Generic data access for one table.

    Concrete models compose or subclass this with an explicit table binding::

        class Articles(RecordModel):
            def __init__(self, db):
                super().__init__(db, TableConfig("articles", sortable_columns={"title"}))

    Methods return the simplified contract: booleans for writes, `None` for
    a missing row, empty lists or zero when a read fails. Driver failures
    never raise out of these methods; use the service attributes
    (`create_service`, `update_service`, `delete_service`, `read_service`)
    to get a `Result` that tells "not found" apart from "driver error".
    Unsafe identifiers always raise `InvalidConditionError`.
    """

    def __init__(self, db: DatabasePort, config: TableConfig | str | None):
        """Bind the model to a database adapter and a table.

        Args:
            db: Database adapter implementing `DatabasePort`.
            config: `TableConfig` or plain table name.

        Raises:
            ConfigurationError: If the adapter or table binding is missing.
        """

        if db is None:
            raise ConfigurationError(
                f"{type(self).__name__} requires a database adapter."
            )
        self.db = db
        self.config = TableConfig.coerce(config)

        self.create_service = CreateService(db, self.config)
        self.update_service = UpdateService(db, self.config)
        self.delete_service = DeleteService(db, self.config)
        self.read_service = ReadService(db, self.config)

    @property
    def table(self) -> str:
        return self.config.table

    def create(self, data: Mapping[str, Any]) -> bool:
        """Insert a new record."""

        return self.create_service.insert(data).ok

    def create_and_return_id(self, data: Mapping[str, Any]) -> Any:
        """Insert a new record and return its id, or `None` on failure."""

        return self.create_service.insert(data, return_id=True).value_or(None)

    def update(self, record_id: Any, data: Mapping[str, Any]) -> bool:
        """Update a record by id.

        `False` covers both "no such id" and driver errors.
        """

        return self.update_service.update(record_id, data).ok

    def delete(self, record_id: Any) -> bool:
        """Delete a record by id."""

        return self.delete_service.delete({self.config.pk: record_id}).ok

    def delete_where(self, conditions: WhereInput, *, confirm_wildcard: bool = False) -> bool:
        """Delete records matching `conditions`.

        An empty condition set raises `WildcardMutationError` unless
        `confirm_wildcard=True`.
        """

        return self.delete_service.delete(conditions, allow_wildcard=confirm_wildcard).ok

    def find_by_id(self, record_id: Any) -> MaybeRow:
        return self.read_service.find_by_id(record_id).value_or(None)

    def find_all(
        self,
        conditions: WhereInput = None,
        order_by: OrderInput = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Rows:
        """Retrieve records with optional filters, sorting, and pagination."""

        return self.read_service.find_all(conditions, order_by, limit, offset).value_or([])

    def paginate(
        self,
        conditions: WhereInput = None,
        order_by: OrderInput = None,
        per_page: int = 10,
        current_page: int = 1,
    ) -> Page:
        """Return one page of records with its pagination descriptor."""

        result = self.read_service.paginate(conditions, order_by, per_page, current_page)
        if result.ok:
            return result.value
        return Page(rows=[], pagination=Pagination.compute(per_page, current_page, 0))

    def fetch_all(self, conditions: WhereInput = None) -> Rows:
        return self.read_service.fetch_all(conditions).value_or([])

    def total_pages(self, per_page: int = 10, conditions: WhereInput = None) -> int:
        return self.read_service.total_pages(per_page, conditions).value_or(0)

    def fetch_one(self, conditions: WhereInput) -> MaybeRow:
        """Fetch the first record matching `conditions`."""

        return self.read_service.fetch_one(conditions).value_or(None)

    def fetch_raw(self, sql: str, params: Any = None) -> MaybeRow:
        """Execute parameterized SQL and return its first row."""

        return self.read_service.fetch_raw(sql, params).value_or(None)

    def search(
        self,
        column: str,
        keyword: str,
        order_by: OrderInput = None,
        limit: Optional[int] = 10,
    ) -> Rows:
        """Search records whose `column` contains `keyword`."""

        return self.read_service.search(column, keyword, order_by, limit).value_or([])

    def count(self, conditions: WhereInput = None) -> int:
        return self.read_service.count(conditions).value_or(0)

    def exists(self, conditions: WhereInput = None) -> bool:
        return bool(self.read_service.exists(conditions).value_or(False))

    def bulk_update(
        self, ids: Sequence[Any], data: Mapping[str, Any], *, atomic: bool = False
    ) -> bool:
        """Apply the same `data` to many ids.

        Stops at the first failure. Without `atomic=True`, updates made
        before the failure are kept.
        """

        return bulk.bulk_update(self, ids, data, atomic=atomic).ok

    def bulk_delete(self, ids: Sequence[Any], *, atomic: bool = False) -> bool:
        """Delete many ids, with the same fail-fast rules as `bulk_update`."""

        return bulk.bulk_delete(self, ids, atomic=atomic).ok

    def bulk_edit(self, records: Sequence[Mapping[str, Any]]) -> bool:
        """Apply per-record field sets in one transaction.

        Example::

            model.bulk_edit([
                {"id": 1, "fields": {"status": "active"}},
                {"id": 2, "fields": {"title": "Updated"}},
            ])
        """

        return bulk.bulk_edit(self, records).ok

    def __repr__(self) -> str:
        return f"{type(self).__name__}(table={self.config.table!r})"
