from __future__ import annotations

import contextlib
import unittest

from record_model import (
    C,
    ConfigurationError,
    CreateService,
    DeleteService,
    DriverError,
    InvalidConditionError,
    ReadService,
    RecordModel,
    Result,
    Status,
    TableConfig,
    UpdateService,
    WildcardMutationError,
)
from record_model.ports.db_api.dialects import MySQLDialect, PostgresDialect, SQLiteDialect


class _Cursor:
    def __init__(self, rowcount: int, lastrowid):  # noqa: ANN001
        self.rowcount = rowcount
        self.lastrowid = lastrowid


class _RecordingDb:
    """Captures SQL instead of running it."""

    def __init__(self, dialect, *, rowcount=1, lastrowid=None, row=None, rows=None, fail=None):  # noqa: ANN001
        self.dialect = dialect
        self.rowcount = rowcount
        self.lastrowid = lastrowid
        self.row = row
        self.rows = rows or []
        self.fail = fail
        self.executed: list[tuple[str, object]] = []
        self.events: list[str] = []

    def _record(self, sql, params):  # noqa: ANN001,ANN202
        self.executed.append((sql, params))
        if self.fail is not None:
            raise self.fail

    def execute(self, sql, params=None):  # noqa: ANN001,ANN201
        self._record(sql, params)
        return _Cursor(self.rowcount, self.lastrowid)

    def fetchone(self, sql, params=None):  # noqa: ANN001,ANN201
        self._record(sql, params)
        return self.row

    def fetchall(self, sql, params=None):  # noqa: ANN001,ANN201
        self._record(sql, params)
        return list(self.rows)

    @contextlib.contextmanager
    def transaction(self):  # noqa: ANN201
        self.events.append("begin")
        try:
            yield
            self.events.append("commit")
        except BaseException:
            self.events.append("rollback")
            raise


class ResultTests(unittest.TestCase):
    def test_truthiness_follows_status(self) -> None:
        self.assertTrue(Result.success(5))
        self.assertFalse(Result.not_found())
        self.assertFalse(Result.invalid(ValueError("x")))
        self.assertFalse(Result.driver_error(DriverError("x")))

    def test_value_or_and_unwrap(self) -> None:
        self.assertEqual(Result.success(5).unwrap(), 5)
        self.assertEqual(Result.not_found().value_or("default"), "default")

        with self.assertRaises(DriverError):
            Result.driver_error(DriverError("boom")).unwrap()
        with self.assertRaises(LookupError):
            Result.not_found().unwrap()


class TableConfigTests(unittest.TestCase):
    def test_missing_or_unsafe_table_fails_construction(self) -> None:
        for table in ("", None, "users; DROP TABLE x", "a.b"):
            with self.subTest(table=table):
                with self.assertRaises(ConfigurationError):
                    TableConfig.coerce(table)

    def test_unsafe_pk_and_allow_lists_fail(self) -> None:
        with self.assertRaises(ConfigurationError):
            TableConfig("users", pk="id--")
        with self.assertRaises(ConfigurationError):
            TableConfig("users", sortable_columns={"name desc"})
        with self.assertRaises(ConfigurationError):
            TableConfig("users", searchable_columns=["ok", "bad col"])

    def test_defaults_and_freezing(self) -> None:
        config = TableConfig("users", pk="user_id", sortable_columns=["name"])

        self.assertEqual(config.default_order, "user_id DESC")
        self.assertIsInstance(config.sortable_columns, frozenset)
        self.assertEqual(config.sort_allow_list(), frozenset({"name", "user_id"}))
        self.assertIsNone(TableConfig("users").sort_allow_list())
        self.assertIs(TableConfig.coerce(config), config)

    def test_record_model_requires_db_and_table(self) -> None:
        db = _RecordingDb(SQLiteDialect())
        with self.assertRaises(ConfigurationError):
            RecordModel(db, "")
        with self.assertRaises(ConfigurationError):
            RecordModel(db, None)
        with self.assertRaises(ConfigurationError):
            RecordModel(None, "users")  # type: ignore[arg-type]


class CreateServiceTests(unittest.TestCase):
    def test_named_insert_with_returning(self) -> None:
        db = _RecordingDb(SQLiteDialect(), row={"id": 12})
        service = CreateService(db, TableConfig("users"))

        result = service.insert({"email": "a@x.com", "age": 3}, return_id=True)

        self.assertEqual(result.value, 12)
        self.assertEqual(
            db.executed[0],
            (
                'INSERT INTO "users" ("email", "age") VALUES (:email_1, :age_2) RETURNING "id";',
                {"email_1": "a@x.com", "age_2": 3},
            ),
        )

    def test_insert_without_returning_uses_lastrowid(self) -> None:
        db = _RecordingDb(MySQLDialect(), lastrowid=77)
        service = CreateService(db, TableConfig("users"))

        result = service.insert({"email": "a@x.com"}, return_id=True)

        self.assertEqual(result.value, 77)
        self.assertEqual(
            db.executed[0], ("INSERT INTO `users` (`email`) VALUES (%s);", ["a@x.com"])
        )

    def test_insert_without_return_id_reports_true(self) -> None:
        db = _RecordingDb(PostgresDialect())
        result = CreateService(db, TableConfig("users")).insert({"email": "a@x.com"})

        self.assertIs(result.value, True)
        self.assertEqual(db.executed[0][0], 'INSERT INTO "users" ("email") VALUES (%s);')

    def test_insert_validation_and_driver_failure(self) -> None:
        db = _RecordingDb(SQLiteDialect(), fail=DriverError("constraint"))
        service = CreateService(db, TableConfig("users"))

        self.assertEqual(service.insert({}).status, Status.INVALID)
        self.assertEqual(service.insert({"email": "x"}).status, Status.DRIVER_ERROR)
        with self.assertRaises(InvalidConditionError):
            service.insert({"email) VALUES (1); --": "x"})


class UpdateServiceTests(unittest.TestCase):
    def test_named_update_keeps_set_and_where_params_apart(self) -> None:
        db = _RecordingDb(SQLiteDialect())
        result = UpdateService(db, TableConfig("t")).update(5, {"status": "x", "id": 9})

        self.assertTrue(result)
        self.assertEqual(
            db.executed[0],
            (
                'UPDATE "t" SET "status" = :set_status_1, "id" = :set_id_2 WHERE "id" = :id_3;',
                {"set_status_1": "x", "set_id_2": 9, "id_3": 5},
            ),
        )

    def test_positional_update(self) -> None:
        db = _RecordingDb(PostgresDialect())
        UpdateService(db, TableConfig("t", pk="uid")).update(5, {"status": "x"})

        self.assertEqual(
            db.executed[0], ('UPDATE "t" SET "status" = %s WHERE "uid" = %s;', ["x", 5])
        )

    def test_update_outcomes(self) -> None:
        config = TableConfig("t")

        missing = UpdateService(_RecordingDb(SQLiteDialect(), rowcount=0), config)
        unknown = UpdateService(_RecordingDb(SQLiteDialect(), rowcount=-1), config)
        failing = UpdateService(_RecordingDb(SQLiteDialect(), fail=DriverError("x")), config)

        self.assertEqual(missing.update(1, {"a": 1}).status, Status.NOT_FOUND)
        self.assertEqual(unknown.update(1, {"a": 1}).status, Status.OK)
        self.assertEqual(failing.update(1, {"a": 1}).status, Status.DRIVER_ERROR)
        self.assertEqual(missing.update(1, {}).status, Status.INVALID)
        self.assertEqual(missing.update(None, {"a": 1}).status, Status.INVALID)


class DeleteServiceTests(unittest.TestCase):
    def test_delete_by_conditions(self) -> None:
        db = _RecordingDb(PostgresDialect(), rowcount=2)
        result = DeleteService(db, TableConfig("t")).delete({"status": "old"})

        self.assertEqual(result.rowcount, 2)
        self.assertEqual(db.executed[0], ('DELETE FROM "t" WHERE "status" = %s;', ["old"]))

    def test_empty_conditions_need_wildcard_consent(self) -> None:
        db = _RecordingDb(PostgresDialect(), rowcount=4)
        service = DeleteService(db, TableConfig("t"))

        for conditions in (None, {}, []):
            with self.subTest(conditions=conditions):
                with self.assertRaises(WildcardMutationError):
                    service.delete(conditions)
        self.assertEqual(db.executed, [])

        result = service.delete({}, allow_wildcard=True)
        self.assertTrue(result)
        self.assertEqual(db.executed[0], ('DELETE FROM "t";', None))

    def test_wildcard_error_is_an_invalid_condition_error(self) -> None:
        self.assertTrue(issubclass(WildcardMutationError, InvalidConditionError))


class ReadServiceTests(unittest.TestCase):
    def test_find_all_sql_uses_default_order(self) -> None:
        db = _RecordingDb(PostgresDialect(), rows=[{"id": 1}])
        result = ReadService(db, TableConfig("t")).find_all({"a": 1}, limit=5, offset=10)

        self.assertEqual(result.value, [{"id": 1}])
        self.assertEqual(
            db.executed[0],
            ('SELECT * FROM "t" WHERE "a" = %s ORDER BY "id" DESC LIMIT %s OFFSET %s;', [1, 5, 10]),
        )

    def test_fetch_all_and_fetch_one_do_not_order(self) -> None:
        db = _RecordingDb(SQLiteDialect(), row=None)
        service = ReadService(db, TableConfig("t"))

        service.fetch_all({"a": 1})
        one = service.fetch_one({"a": 2})

        self.assertEqual(db.executed[0], ('SELECT * FROM "t" WHERE "a" = :a_1;', {"a_1": 1}))
        self.assertEqual(
            db.executed[1],
            ('SELECT * FROM "t" WHERE "a" = :a_1 LIMIT :__limit;', {"a_1": 2, "__limit": 1}),
        )
        self.assertEqual(one.status, Status.NOT_FOUND)

    def test_search_sql_escapes_keyword(self) -> None:
        db = _RecordingDb(SQLiteDialect())
        ReadService(db, TableConfig("t")).search("title", "50%")

        self.assertEqual(
            db.executed[0],
            (
                'SELECT * FROM "t" WHERE "title" LIKE :title_1 ESCAPE \'!\' '
                'ORDER BY "id" DESC LIMIT :__limit;',
                {"title_1": "%50!%%", "__limit": 10},
            ),
        )

    def test_mysql_search_uses_backticks(self) -> None:
        db = _RecordingDb(MySQLDialect())
        ReadService(db, TableConfig("t")).search("title", "abc", order_by="", limit=None)

        self.assertEqual(
            db.executed[0],
            ("SELECT * FROM `t` WHERE `title` LIKE %s ESCAPE '!';", ["%abc%"]),
        )

    def test_count_and_total_pages(self) -> None:
        db = _RecordingDb(PostgresDialect(), row={"__count": 21})
        service = ReadService(db, TableConfig("t"))

        self.assertEqual(service.count({"a": 1}).value, 21)
        self.assertEqual(service.total_pages(10).value, 3)
        self.assertEqual(
            db.executed[0], ('SELECT COUNT(*) AS "__count" FROM "t" WHERE "a" = %s;', [1])
        )
        with self.assertRaises(ValueError):
            service.total_pages(0)

    def test_driver_failures_become_results(self) -> None:
        db = _RecordingDb(SQLiteDialect(), fail=DriverError("gone"))
        service = ReadService(db, TableConfig("t"))

        for result in (
            service.find_all(),
            service.fetch_one({"a": 1}),
            service.fetch_raw("SELECT 1"),
            service.search("title", "x"),
            service.count(),
            service.exists(),
            service.paginate(),
            service.total_pages(),
        ):
            with self.subTest(result=result):
                self.assertEqual(result.status, Status.DRIVER_ERROR)

    def test_raw_percent_reaches_format_driver_with_params(self) -> None:
        db = _RecordingDb(PostgresDialect(), row={"__count": 2})
        service = ReadService(db, TableConfig("articles"))

        service.count(C.raw("title LIKE 'Intro%'"))
        service.fetch_all(C.raw("title LIKE 'Intro%'"))

        self.assertEqual(
            db.executed[0],
            ('SELECT COUNT(*) AS "__count" FROM "articles" WHERE (title LIKE \'Intro%%\');', []),
        )
        self.assertEqual(
            db.executed[1],
            ('SELECT * FROM "articles" WHERE (title LIKE \'Intro%%\');', []),
        )

    def test_fetch_raw_params_are_passed_through(self) -> None:
        db = _RecordingDb(PostgresDialect(), row={"n": 1})
        service = ReadService(db, TableConfig("t"))

        service.fetch_raw("SELECT %s AS n", (1,))
        service.fetch_raw("SELECT 1 AS n")

        self.assertEqual(db.executed[0], ("SELECT %s AS n", [1]))
        self.assertEqual(db.executed[1], ("SELECT 1 AS n", None))
        with self.assertRaises(InvalidConditionError):
            service.fetch_raw("")
        with self.assertRaises(InvalidConditionError):
            service.fetch_raw("SELECT %s", "1")

    def test_search_allow_list(self) -> None:
        db = _RecordingDb(SQLiteDialect())
        service = ReadService(db, TableConfig("t", searchable_columns={"title"}))

        with self.assertRaises(InvalidConditionError):
            service.search("body", "x")
        with self.assertRaises(InvalidConditionError):
            service.search("title; --", "x")
        self.assertEqual(db.executed, [])


if __name__ == "__main__":
    unittest.main()
