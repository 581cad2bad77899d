"""Basic CRUD with a table-bound RecordModel over sqlite3."""

from __future__ import annotations

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
    # 1) Create DB adapter and bind a model to one table.
    conn = sqlite3.connect(":memory:", isolation_level=None)
    db = Database(conn, SQLiteDialect())
    users = RecordModel(db, "users")

    try:
        db.execute(
            'CREATE TABLE "users" ('
            '"id" INTEGER PRIMARY KEY, "email" TEXT NOT NULL, "age" INTEGER);'
        )

        # 2) Insert rows. create() answers True/False; the id variant returns the key.
        print("Created:", users.create({"email": "alice@example.com", "age": 25}))
        bob_id = users.create_and_return_id({"email": "bob@example.com", "age": 30})
        print("Bob id:", bob_id)

        # 3) Get by PK.
        print("Fetched by PK:", users.find_by_id(bob_id))

        # 4) Partial update by PK.
        print("Updated:", users.update(bob_id, {"age": 31}))
        print("Update missing id:", users.update(999, {"age": 1}))

        # 5) List rows; the default order is primary key descending.
        print("All users:", users.find_all())

        # 6) Delete by PK and by conditions.
        print("Deleted Bob:", users.delete(bob_id))
        print("Deleted adults:", users.delete_where({"age": [25, 26]}))
        print("Remaining:", users.count())

        # 7) Writes that the driver rejects come back as False, not exceptions.
        print("Insert without email:", users.create({"age": 40}))
    finally:
        conn.close()


if __name__ == "__main__":
    main()
