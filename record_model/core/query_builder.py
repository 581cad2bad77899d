"""SQL fragment builders for filtering, sorting, and paging.

This module is the condition mapper: it turns condition sets into a
parameterized `WHERE` fragment and its bound values. Column names are
validated before they reach SQL text; values are always bound.
"""

from __future__ import annotations

import re
from collections.abc import Mapping as MappingABC
from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from .conditions import (
    Condition,
    ConditionGroup,
    NotCondition,
    OrderBy,
    RawCondition,
    WhereExpression,
    is_safe_identifier,
)
from .contracts import DialectPort
from .errors import InvalidConditionError
from .types import NamedParams, PositionalParams, QueryParams


WhereInput = Optional[
    Mapping[str, Any] | WhereExpression | Sequence[WhereExpression | Mapping[str, Any]]
]
OrderInput = Optional[str | OrderBy | Sequence[OrderBy | str]]

_BINARY_OPS = frozenset({"=", "<>", "!=", "<", "<=", ">", ">=", "LIKE", "NOT LIKE"})
_UNARY_OPS = frozenset({"IS NULL", "IS NOT NULL"})
_SET_TYPES = (list, tuple, set, frozenset)
_PERCENT_RE = re.compile(r"%%|%")


@dataclass(frozen=True)
class CompiledFragment:
    """Represents a compiled SQL fragment with its bound parameters."""

    sql: str
    params: QueryParams


class ParamBinder:
    """Collects bound values and hands out matching placeholders.

    One binder is shared by every fragment of a statement so named
    parameters never collide (for example `SET` values and `WHERE` values).
    """

    def __init__(self, dialect: DialectPort) -> None:
        self.dialect = dialect
        self._counter = 0
        self.force_params = False
        self.params: NamedParams | PositionalParams = (
            {} if dialect.paramstyle == "named" else []
        )

    def bind(self, hint: str, value: Any) -> str:
        """Register `value` and return its placeholder."""

        self._counter += 1
        safe = "".join(ch if ch.isalnum() or ch == "_" else "_" for ch in hint)
        key = f"{safe}_{self._counter}"
        if isinstance(self.params, dict):
            self.params[key] = value
        else:
            self.params.append(value)
        return self.dialect.placeholder(key)

    def result(self) -> QueryParams:
        """Return collected parameters, or `None` when nothing was bound.

        `force_params` keeps an empty list so `format` drivers still apply
        their `%%` unescaping.
        """

        if self.params or self.force_params:
            return self.params
        return None


def check_identifier(name: Any, *, what: str = "column") -> str:
    """Return `name` when it is a safe identifier.

    Raises:
        InvalidConditionError: If `name` holds anything but letters, digits,
            or underscores.
    """

    if not is_safe_identifier(name):
        raise InvalidConditionError(f"Unsafe {what} name: {name!r}")
    return name


def is_empty_where(where: WhereInput) -> bool:
    """Return whether `where` selects every row."""

    if where is None:
        return True
    if isinstance(where, MappingABC):
        return not where
    if isinstance(where, SequenceABC) and not isinstance(where, (str, bytes)):
        return all(is_empty_where(item) for item in where)
    return False


def compile_where(
    where: WhereInput,
    dialect: DialectPort,
    binder: Optional[ParamBinder] = None,
) -> CompiledFragment:
    """Compile a condition set into a SQL `WHERE` fragment.

    Accepted inputs:
        - `None` or an empty mapping/list: no `WHERE` at all.
        - A mapping `column -> value`: equality per key, joined with `AND`.
          `None` maps to `IS NULL`; list/tuple/set values map to `IN (...)`.
        - One expression (`Condition`, `RawCondition`, group, negation).
        - A sequence mixing expressions and mappings, joined with `AND`.

    Args:
        where: Condition set.
        dialect: SQL dialect used for identifier quoting and placeholders.
        binder: Shared binder when the fragment is part of a larger statement.

    Returns:
        A compiled SQL fragment and parameters. Empty fragment if no condition.

    Raises:
        InvalidConditionError: On unsafe column names or unknown operators.
    """

    binder = binder or ParamBinder(dialect)
    clauses = _compile_items(where, dialect, binder)
    if not clauses:
        return CompiledFragment("", binder.result())
    return CompiledFragment(f" WHERE {' AND '.join(clauses)}", binder.result())


def compile_order_by(
    order_by: OrderInput,
    dialect: DialectPort,
    *,
    allowed: Optional[Iterable[str]] = None,
) -> str:
    """Compile `ORDER BY` clause from ordering inputs.

    Args:
        order_by: `OrderBy` items, or a string such as `"id DESC, name"`.
        dialect: SQL dialect used for identifier quoting.
        allowed: Optional allow-list of sortable columns.

    Returns:
        SQL `ORDER BY` fragment or an empty string.

    Raises:
        InvalidConditionError: On unsafe or disallowed columns, or an
            unknown direction keyword.
    """

    items = parse_order_by(order_by)
    if not items:
        return ""

    allowed_set = frozenset(allowed) if allowed is not None else None
    for item in items:
        check_identifier(item.col, what="order by column")
        if allowed_set is not None and item.col not in allowed_set:
            raise InvalidConditionError(
                f"Column {item.col!r} is not sortable. "
                f"Allowed: {', '.join(sorted(allowed_set)) or '<none>'}"
            )

    ordered_cols = ", ".join(
        f"{dialect.q(item.col)} {'DESC' if item.desc else 'ASC'}" for item in items
    )
    return f" ORDER BY {ordered_cols}"


def parse_order_by(order_by: OrderInput) -> List[OrderBy]:
    """Normalize ordering input into `OrderBy` items."""

    if order_by is None:
        return []
    if isinstance(order_by, OrderBy):
        return [order_by]
    if isinstance(order_by, str):
        return [_parse_order_term(term) for term in order_by.split(",") if term.strip()]
    if isinstance(order_by, SequenceABC):
        parsed: List[OrderBy] = []
        for item in order_by:
            if isinstance(item, OrderBy):
                parsed.append(item)
            elif isinstance(item, str):
                parsed.extend(parse_order_by(item))
            else:
                raise InvalidConditionError(f"Unsupported order by item: {item!r}")
        return parsed
    raise InvalidConditionError(f"Unsupported order by input: {order_by!r}")


def append_limit_offset(
    sql: str,
    params: QueryParams,
    *,
    limit: Optional[int],
    offset: Optional[int],
    dialect: DialectPort,
) -> Tuple[str, QueryParams]:
    """Append pagination clauses and merge parameters.

    An offset of zero is dropped. An offset without a limit uses the
    dialect's unbounded limit form, since most engines reject a bare
    `OFFSET`.

    Returns:
        Updated SQL and merged parameters.
    """

    if limit is not None and (not isinstance(limit, int) or limit < 0):
        raise ValueError("limit must be a non-negative integer.")
    if offset is not None and (not isinstance(offset, int) or offset < 0):
        raise ValueError("offset must be a non-negative integer.")
    if not offset:
        offset = None

    if dialect.paramstyle == "named":
        named_params: NamedParams = {}
        if isinstance(params, dict):
            named_params.update(params)
        if limit is not None:
            named_params["__limit"] = limit
            sql += " LIMIT :__limit"
        elif offset is not None:
            sql += f" LIMIT {dialect.unbounded_limit}"
        if offset is not None:
            named_params["__offset"] = offset
            sql += " OFFSET :__offset"
        return sql, named_params if named_params else None

    positional_params: PositionalParams = []
    if isinstance(params, list):
        positional_params.extend(params)
    if limit is not None:
        sql += f" LIMIT {dialect.placeholder('limit')}"
        positional_params.append(limit)
    elif offset is not None:
        sql += f" LIMIT {dialect.unbounded_limit}"
    if offset is not None:
        sql += f" OFFSET {dialect.placeholder('offset')}"
        positional_params.append(offset)
    if positional_params or isinstance(params, list):
        return sql, positional_params
    return sql, None


def _compile_items(
    where: WhereInput, dialect: DialectPort, binder: ParamBinder
) -> List[str]:
    if where is None:
        return []
    if isinstance(where, MappingABC):
        return [
            _compile_mapping_entry(col, value, dialect, binder)
            for col, value in where.items()
        ]
    if isinstance(where, (Condition, RawCondition, ConditionGroup, NotCondition)):
        return [_compile_expression(where, dialect, binder)]
    if isinstance(where, SequenceABC) and not isinstance(where, (str, bytes)):
        clauses: List[str] = []
        for item in where:
            clauses.extend(_compile_items(item, dialect, binder))
        return clauses
    raise InvalidConditionError(f"Unsupported condition input: {where!r}")


def _compile_mapping_entry(
    col: Any, value: Any, dialect: DialectPort, binder: ParamBinder
) -> str:
    check_identifier(col)
    if value is None:
        condition = Condition(col=col, op="IS NULL", is_unary=True)
    elif isinstance(value, _SET_TYPES):
        condition = Condition(col=col, op="IN", values=list(value))
    else:
        condition = Condition(col=col, op="=", value=value)
    return _compile_condition(condition, dialect, binder)


def _compile_expression(
    expr: WhereExpression, dialect: DialectPort, binder: ParamBinder
) -> str:
    if isinstance(expr, Condition):
        return _compile_condition(expr, dialect, binder)
    if isinstance(expr, RawCondition):
        return _compile_raw(expr, dialect, binder)
    if isinstance(expr, NotCondition):
        return f"NOT ({_compile_expression(expr.item, dialect, binder)})"
    if isinstance(expr, ConditionGroup):
        if expr.operator not in ("AND", "OR"):
            raise InvalidConditionError(f"Unsupported group operator: {expr.operator!r}")
        if not expr.items:
            raise InvalidConditionError("Grouped condition must not be empty.")
        inner = f" {expr.operator} ".join(
            _compile_expression(item, dialect, binder) for item in expr.items
        )
        return f"({inner})"
    raise InvalidConditionError(f"Unsupported condition expression: {expr!r}")


def _compile_condition(
    condition: Condition, dialect: DialectPort, binder: ParamBinder
) -> str:
    """Compile one condition into SQL, binding its values."""

    col_sql = dialect.q(check_identifier(condition.col))
    op = condition.op.upper() if isinstance(condition.op, str) else condition.op

    if condition.is_unary:
        if op not in _UNARY_OPS:
            raise InvalidConditionError(f"Unsupported unary operator: {condition.op!r}")
        return f"{col_sql} {op}"

    if op == "IN":
        values = list(condition.values or [])
        if not values:
            return "1=0"
        placeholders = ", ".join(binder.bind(condition.col, value) for value in values)
        return f"{col_sql} IN ({placeholders})"

    if op not in _BINARY_OPS:
        raise InvalidConditionError(f"Unsupported operator: {condition.op!r}")
    return f"{col_sql} {op} {binder.bind(condition.col, condition.value)}"


def _compile_raw(raw: RawCondition, dialect: DialectPort, binder: ParamBinder) -> str:
    parts = raw.sql.split("?")
    if dialect.paramstyle == "format" and "%" in raw.sql:
        # Literal % must reach format-style drivers as %%.
        parts = [_PERCENT_RE.sub("%%", part) for part in parts]
        binder.force_params = True
    if len(parts) - 1 != len(raw.params):
        raise InvalidConditionError(
            f"Raw condition expects {len(parts) - 1} value(s), got {len(raw.params)}."
        )
    sql = parts[0]
    for value, tail in zip(raw.params, parts[1:]):
        sql += binder.bind("raw", value) + tail
    return f"({sql})"


def _parse_order_term(term: str) -> OrderBy:
    tokens = term.split()
    if len(tokens) == 1:
        return OrderBy(col=tokens[0])
    if len(tokens) == 2:
        direction = tokens[1].upper()
        if direction not in ("ASC", "DESC"):
            raise InvalidConditionError(f"Unsupported sort direction: {tokens[1]!r}")
        return OrderBy(col=tokens[0], desc=direction == "DESC")
    raise InvalidConditionError(f"Malformed order by term: {term.strip()!r}")
