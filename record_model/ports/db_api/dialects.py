"""SQL dialects: identifier quoting, placeholders, and per-engine quirks."""

from __future__ import annotations

from typing import Any, Optional

_PLACEHOLDERS = {
    "named": ":{key}",
    "qmark": "?",
    "format": "%s",
}


class Dialect:
    """Base dialect; subclasses override the class attributes.

    Attributes:
        name: Engine name. `Database` uses `"sqlite"` to decide whether it
            must send `BEGIN` itself.
        paramstyle: DB-API paramstyle of the target driver.
        supports_returning: Whether `INSERT ... RETURNING` is available.
        unbounded_limit: Literal used for `LIMIT` when only an offset is given.
        like_escape_char: Escape character paired with `ESCAPE` in searches.
        begin_statement: Statement opening a transaction on autocommit
            connections.
    """

    name: str = "generic"
    paramstyle: str = "named"
    quote_char: str = '"'
    supports_returning: bool = False
    unbounded_limit: str = "-1"
    like_escape_char: str = "!"
    begin_statement: str = "BEGIN"

    def q(self, ident: str) -> str:
        return f"{self.quote_char}{ident}{self.quote_char}"

    def placeholder(self, key: str) -> str:
        """Placeholder for bound parameter `key` in this paramstyle."""

        try:
            template = _PLACEHOLDERS[self.paramstyle]
        except KeyError:
            raise ValueError(f"Unsupported paramstyle: {self.paramstyle}") from None
        return template.format(key=key)

    def returning_clause(self, pk_name: str) -> str:
        return f" RETURNING {self.q(pk_name)}" if self.supports_returning else ""

    def get_lastrowid(self, cursor: Any) -> Optional[int]:
        return getattr(cursor, "lastrowid", None)

    def escape_like(self, keyword: str) -> str:
        """Escape `%`, `_`, and the escape character so `keyword` matches literally."""

        esc = self.like_escape_char
        escaped = keyword.replace(esc, esc * 2)
        for wildcard in ("%", "_"):
            escaped = escaped.replace(wildcard, esc + wildcard)
        return escaped

    def like_escape_clause(self) -> str:
        return f" ESCAPE '{self.like_escape_char}'"


class SQLiteDialect(Dialect):
    name = "sqlite"
    supports_returning = True


class PostgresDialect(Dialect):
    """PostgreSQL via psycopg/psycopg2 (`%s` parameters, `LIMIT ALL`)."""

    name = "postgres"
    paramstyle = "format"
    supports_returning = True
    unbounded_limit = "ALL"


class MySQLDialect(Dialect):
    """MySQL/MariaDB (backtick quoting, `%s` parameters, ids via `lastrowid`)."""

    name = "mysql"
    paramstyle = "format"
    quote_char = "`"
    # MySQL has no unbounded LIMIT keyword; this is the documented max.
    unbounded_limit = "18446744073709551615"
    begin_statement = "START TRANSACTION"
