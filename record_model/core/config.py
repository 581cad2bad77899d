"""Immutable table binding consumed by `RecordModel` and its services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .conditions import is_safe_identifier
from .errors import ConfigurationError


@dataclass(frozen=True)
class TableConfig:
    """Binds a model to one table.

    Attributes:
        table: Table name. Required, identifier characters only.
        pk: Primary key column used by id-based operations.
        sortable_columns: Optional allow-list for `ORDER BY` columns.
        searchable_columns: Optional allow-list for `search()` columns.
        default_order: Ordering used when a read call passes none. Defaults
            to the primary key, newest first.
    """

    table: str
    pk: str = "id"
    sortable_columns: Optional[frozenset[str]] = None
    searchable_columns: Optional[frozenset[str]] = None
    default_order: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.table, str) or not self.table:
            raise ConfigurationError("Table name is not set for this model.")
        if not is_safe_identifier(self.table):
            raise ConfigurationError(f"Unsafe table name: {self.table!r}")
        if not is_safe_identifier(self.pk):
            raise ConfigurationError(f"Unsafe primary key column: {self.pk!r}")

        object.__setattr__(
            self, "sortable_columns", _freeze_columns(self.sortable_columns, "sortable")
        )
        object.__setattr__(
            self,
            "searchable_columns",
            _freeze_columns(self.searchable_columns, "searchable"),
        )
        if self.default_order is None:
            object.__setattr__(self, "default_order", f"{self.pk} DESC")

    @classmethod
    def coerce(cls, value: TableConfig | str | None) -> TableConfig:
        """Accept either a ready config or a bare table name."""

        if isinstance(value, TableConfig):
            return value
        if value is None:
            raise ConfigurationError("Table name is not set for this model.")
        return cls(table=value)

    def sort_allow_list(self) -> Optional[frozenset[str]]:
        """Return sortable columns plus the primary key, or `None` for any."""

        if self.sortable_columns is None:
            return None
        return self.sortable_columns | {self.pk}


def _freeze_columns(
    columns: Optional[Iterable[str]], label: str
) -> Optional[frozenset[str]]:
    if columns is None:
        return None
    if isinstance(columns, str):
        columns = (columns,)
    frozen = frozenset(columns)
    unsafe = sorted(name for name in frozen if not is_safe_identifier(name))
    if unsafe:
        raise ConfigurationError(f"Unsafe {label} column names: {unsafe}")
    return frozen
