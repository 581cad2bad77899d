"""Page metadata computed from a live row count."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator

from .types import Record, Rows


def total_pages_for(total_records: int, per_page: int) -> int:
    """Return `ceil(total_records / per_page)`; zero rows means zero pages."""

    if per_page < 1:
        raise ValueError("per_page must be a positive integer.")
    if total_records <= 0:
        return 0
    return math.ceil(total_records / per_page)


def page_offset(per_page: int, current_page: int) -> int:
    """Return the row offset of `current_page` (1-based)."""

    if per_page < 1:
        raise ValueError("per_page must be a positive integer.")
    if current_page < 1:
        raise ValueError("current_page must be 1 or greater.")
    return (current_page - 1) * per_page


@dataclass(frozen=True)
class Pagination:
    """Pagination descriptor for one page request."""

    per_page: int
    current_page: int
    total_records: int
    total_pages: int

    @classmethod
    def compute(cls, per_page: int, current_page: int, total_records: int) -> Pagination:
        page_offset(per_page, current_page)
        return cls(
            per_page=per_page,
            current_page=current_page,
            total_records=total_records,
            total_pages=total_pages_for(total_records, per_page),
        )

    @property
    def offset(self) -> int:
        return page_offset(self.per_page, self.current_page)

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    def to_dict(self) -> Dict[str, int]:
        return {
            "per_page": self.per_page,
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "total_records": self.total_records,
        }


@dataclass(frozen=True)
class Page:
    """Rows of one page plus its pagination descriptor."""

    rows: Rows = field(default_factory=list)
    pagination: Pagination = field(default_factory=lambda: Pagination(1, 1, 0, 0))

    def __iter__(self) -> Iterator[Record]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def to_dict(self) -> Dict[str, Any]:
        """Return the `{"data": [...], "pagination": {...}}` payload shape."""

        return {"data": list(self.rows), "pagination": self.pagination.to_dict()}
