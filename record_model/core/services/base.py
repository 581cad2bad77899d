"""Shared state for services bound to one table."""

from __future__ import annotations

import logging
from typing import Any

from ..config import TableConfig
from ..contracts import DatabasePort
from ..errors import DriverError
from ..results import Result

logger = logging.getLogger(__name__)


class TableService:
    """Holds the injected database adapter and the table binding."""

    def __init__(self, db: DatabasePort, config: TableConfig):
        self.db = db
        self.config = config
        self.d = db.dialect

    @property
    def table_sql(self) -> str:
        return self.d.q(self.config.table)

    def _driver_failure(self, action: str, exc: DriverError) -> Result[Any]:
        logger.warning("%s on %s failed: %s", action, self.config.table, exc)
        return Result.driver_error(exc)
