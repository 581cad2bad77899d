"""Conditions, sorting, pagination, and keyword search."""

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

from record_model import C, Database, RecordModel, SQLiteDialect, TableConfig


class Products(RecordModel):
    def __init__(self, db: Database):
        super().__init__(
            db,
            TableConfig(
                "products",
                sortable_columns={"price", "name"},
                searchable_columns={"name"},
            ),
        )


def main() -> None:
    conn = sqlite3.connect(":memory:", isolation_level=None)
    db = Database(conn, SQLiteDialect())
    products = Products(db)

    try:
        db.execute(
            'CREATE TABLE "products" ('
            '"id" INTEGER PRIMARY KEY, "name" TEXT, "category" TEXT, "price" REAL);'
        )
        for i in range(1, 13):
            products.create(
                {
                    "name": f"Item {i}" if i != 12 else "50% off mug",
                    "category": "kitchen" if i % 3 else "books",
                    "price": 2.5 * i,
                }
            )

        # Mappings are AND-ed equality; lists become IN, None becomes IS NULL.
        print("Kitchen count:", products.count({"category": "kitchen"}))

        # Expressions compose with groups and negation.
        cheap_or_books = C.or_(C.lt("price", 6), C.eq("category", "books"))
        print("Cheap or books:", products.find_all(cheap_or_books, order_by="price"))

        # Pagination: rows for the requested page plus the descriptor.
        page = products.paginate(order_by="price DESC", per_page=5, current_page=2)
        print("Page 2:", [row["name"] for row in page])
        print("Pagination:", page.pagination.to_dict())
        print("Total pages at 5/page:", products.total_pages(5))

        # Search escapes LIKE wildcards in the keyword.
        print("Search '50%':", products.search("name", "50%"))

        # Sorting outside the allow-list is rejected before any SQL runs.
        try:
            products.find_all(order_by="category")
        except ValueError as exc:
            print("Rejected order:", exc)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
