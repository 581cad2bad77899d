"""Table-bound services composed by `RecordModel`."""

from .base import TableService
from .create_service import CreateService
from .delete_service import DeleteService
from .read_service import ReadService
from .update_service import UpdateService

__all__ = [
    "CreateService",
    "DeleteService",
    "ReadService",
    "TableService",
    "UpdateService",
]
