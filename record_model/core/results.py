"""Explicit outcome type returned by every service call."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

V = TypeVar("V")


class Status(str, Enum):
    """Outcome category of one service call."""

    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID = "invalid"
    DRIVER_ERROR = "driver_error"


@dataclass(frozen=True)
class Result(Generic[V]):
    """Outcome of one operation.

    A result is truthy only when `status` is `Status.OK`. Callers that only
    need the simplified contract can test it as a boolean; callers that need
    to tell "no such row" from "driver failure" inspect `status`.

    Attributes:
        status: Outcome category.
        value: Operation payload (row, rows, id, count...) on success.
        error: Exception describing the failure, when there is one.
        rowcount: Rows affected by a write statement.
    """

    status: Status
    value: Optional[V] = None
    error: Optional[BaseException] = None
    rowcount: int = 0

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    def __bool__(self) -> bool:
        return self.ok

    def value_or(self, default: Any) -> Any:
        """Return `value` on success, otherwise `default`."""

        return self.value if self.ok else default

    def unwrap(self) -> V:
        """Return `value` or raise the stored error.

        Raises:
            LookupError: When the result is `NOT_FOUND` without an error.
        """

        if self.ok:
            return self.value  # type: ignore[return-value]
        if self.error is not None:
            raise self.error
        raise LookupError(f"operation finished with status {self.status.value!r}")

    @classmethod
    def success(cls, value: Any = None, *, rowcount: int = 0) -> Result[Any]:
        return cls(Status.OK, value=value, rowcount=rowcount)

    @classmethod
    def not_found(cls, *, rowcount: int = 0) -> Result[Any]:
        return cls(Status.NOT_FOUND, rowcount=rowcount)

    @classmethod
    def invalid(cls, error: BaseException) -> Result[Any]:
        return cls(Status.INVALID, error=error)

    @classmethod
    def driver_error(cls, error: BaseException) -> Result[Any]:
        return cls(Status.DRIVER_ERROR, error=error)
