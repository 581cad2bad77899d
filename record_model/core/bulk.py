"""Bulk update, delete, and edit implementations used by `RecordModel`.

`bulk_update` and `bulk_delete` are best-effort loops by default: they stop
at the first failure and leave earlier changes in place. Pass `atomic=True`
to run the same loop inside one transaction instead. `bulk_edit` is always
transactional.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from .errors import DriverError
from .results import Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkEditReport:
    """Counters for one `bulk_edit` batch.

    Attributes:
        applied: Entries whose UPDATE matched a row.
        skipped: Malformed entries that were ignored.
        missing: Well-formed entries whose id matched no row.
    """

    applied: int = 0
    skipped: int = 0
    missing: int = 0


class _StopBatch(Exception):
    """Aborts an atomic loop so the transaction rolls back."""

    def __init__(self, result: Result[Any]):
        super().__init__(result.status.value)
        self.result = result


def bulk_update(
    model: Any, ids: Sequence[Any], data: Mapping[str, Any], *, atomic: bool = False
) -> Result[int]:
    """Apply the same `data` to every id, stopping at the first failure."""

    if not ids or not data:
        return Result.invalid(ValueError("bulk_update() needs ids and data."))
    return _run_per_id(
        model,
        "bulk update",
        ids,
        lambda record_id: model.update_service.update(record_id, data),
        atomic=atomic,
    )


def bulk_delete(model: Any, ids: Sequence[Any], *, atomic: bool = False) -> Result[int]:
    """Delete every id, stopping at the first failure."""

    if not ids:
        return Result.invalid(ValueError("bulk_delete() needs ids."))
    pk = model.config.pk
    return _run_per_id(
        model,
        "bulk delete",
        ids,
        lambda record_id: model.delete_service.delete({pk: record_id}),
        atomic=atomic,
    )


def bulk_edit(model: Any, records: Sequence[Mapping[str, Any]]) -> Result[BulkEditReport]:
    """Apply per-record field sets inside one transaction.

    Each entry is `{"id": ..., "fields": {...}}`. Entries without an id,
    without fields, or whose fields are not a non-empty mapping are skipped.
    Any driver error rolls the whole batch back.

    Returns:
        `Result` holding a `BulkEditReport` on commit, `DRIVER_ERROR` after
        a rollback, `INVALID` for an empty batch.
    """

    if not records:
        return Result.invalid(ValueError("bulk_edit() needs at least one record."))

    table = model.config.table
    applied = skipped = missing = 0
    try:
        with model.db.transaction():
            for index, entry in enumerate(records):
                if not _is_well_formed(entry):
                    skipped += 1
                    logger.debug("bulk edit on %s skipped entry %d", table, index)
                    continue
                count = model.update_service.update_or_raise(entry["id"], entry["fields"])
                if count == 0:
                    missing += 1
                else:
                    applied += 1
    except DriverError as exc:
        logger.error("bulk edit on %s rolled back: %s", table, exc)
        return Result.driver_error(exc)

    report = BulkEditReport(applied=applied, skipped=skipped, missing=missing)
    logger.info(
        "bulk edit on %s committed: %d applied, %d skipped, %d missing",
        table,
        applied,
        skipped,
        missing,
    )
    return Result.success(report, rowcount=applied)


def _is_well_formed(entry: Any) -> bool:
    if not isinstance(entry, MappingABC):
        return False
    if entry.get("id") is None:
        return False
    fields = entry.get("fields")
    return isinstance(fields, MappingABC) and bool(fields)


def _run_per_id(
    model: Any,
    action: str,
    ids: Sequence[Any],
    apply: Callable[[Any], Result[Any]],
    *,
    atomic: bool,
) -> Result[int]:
    table = model.config.table
    if not atomic:
        done = 0
        for record_id in ids:
            result = apply(record_id)
            if not result:
                logger.warning(
                    "%s on %s stopped at id %r (%s) after %d change(s)",
                    action,
                    table,
                    record_id,
                    result.status.value,
                    done,
                )
                return result
            done += 1
        return Result.success(done, rowcount=done)

    done = 0
    current: Any = None
    try:
        with model.db.transaction():
            for current in ids:
                result = apply(current)
                if not result:
                    raise _StopBatch(result)
                done += 1
    except _StopBatch as stop:
        logger.warning(
            "%s on %s rolled back at id %r (%s)",
            action,
            table,
            current,
            stop.result.status.value,
        )
        return stop.result
    except DriverError as exc:
        logger.error("%s on %s rolled back: %s", action, table, exc)
        return Result.driver_error(exc)
    return Result.success(done, rowcount=done)
