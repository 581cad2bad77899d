"""Exception hierarchy raised by the record access layer."""

from __future__ import annotations


class RecordModelError(Exception):
    """Base class for every error raised by `record_model`."""


class ConfigurationError(RecordModelError):
    """Raised when a model is built without a usable table binding."""


class InvalidConditionError(RecordModelError, ValueError):
    """Raised for unsafe identifiers or malformed predicates.

    Nothing is sent to the database when this error is raised.
    """


class WildcardMutationError(InvalidConditionError):
    """Raised when a delete would match every row without explicit consent."""


class DriverError(RecordModelError):
    """Wraps a DB-API driver failure (connectivity, constraints, syntax).

    The original driver exception is kept as `__cause__` and `original`.
    """

    def __init__(self, message: str, original: BaseException | None = None):
        super().__init__(message)
        self.original = original
