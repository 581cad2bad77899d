"""Bulk update/delete/edit and their failure behavior."""

from __future__ import annotations

import logging
import sqlite3
import sys
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "record_model").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from record_model import Database, RecordModel, SQLiteDialect


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    conn = sqlite3.connect(":memory:", isolation_level=None)
    db = Database(conn, SQLiteDialect())
    tasks = RecordModel(db, "tasks")

    try:
        db.execute('CREATE TABLE "tasks" ("id" INTEGER PRIMARY KEY, "title" TEXT NOT NULL, "status" TEXT);')
        for i in range(1, 6):
            tasks.create({"id": i, "title": f"Task {i}", "status": "new"})

        # Same data for many ids; stops at the first id that fails.
        print("bulk_update:", tasks.bulk_update([1, 2], {"status": "active"}))
        print("bulk_update with a missing id:", tasks.bulk_update([3, 99, 4], {"status": "active"}))
        print("Task 3 kept its change:", tasks.find_by_id(3))

        # atomic=True rolls the whole loop back instead.
        print("atomic bulk_delete:", tasks.bulk_delete([4, 99], atomic=True))
        print("Task 4 still there:", tasks.exists({"id": 4}))

        # Per-record field sets in one transaction; malformed entries are skipped.
        print(
            "bulk_edit:",
            tasks.bulk_edit(
                [
                    {"id": 4, "fields": {"status": "done"}},
                    {"id": 5},
                ]
            ),
        )

        # A driver error anywhere rolls the whole batch back.
        print(
            "bulk_edit with a bad row:",
            tasks.bulk_edit(
                [
                    {"id": 5, "fields": {"status": "done"}},
                    {"id": 1, "fields": {"title": None}},
                ]
            ),
        )
        print("Final:", tasks.fetch_all())
    finally:
        conn.close()


if __name__ == "__main__":
    main()
