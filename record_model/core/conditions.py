"""Predicate primitives used to select rows for read, update, and delete.

Predicates are plain frozen values. Nothing here touches SQL text; the
condition mapper in `query_builder` validates and renders them.
"""

from __future__ import annotations

import re
from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9_]+$")


def is_safe_identifier(name: Any) -> bool:
    """Return whether `name` only holds ASCII letters, digits, or underscores."""

    return isinstance(name, str) and bool(_IDENTIFIER_RE.match(name))


@dataclass(frozen=True)
class Condition:
    """One column predicate.

    Attributes:
        col: Column the predicate applies to.
        op: Operator text, checked against an allow-list at compile time.
        value: Operand of a binary operator.
        values: Operands of `IN`.
        is_unary: True for `IS NULL` / `IS NOT NULL`, which take no operand.
    """

    col: str
    op: str
    value: Any = None
    values: Optional[Sequence[Any]] = None
    is_unary: bool = False


@dataclass(frozen=True)
class RawCondition:
    """Trusted SQL fragment with `?` markers and bound values.

    The fragment text is caller-controlled; only the values are treated as
    untrusted and they are always bound.
    """

    sql: str
    params: tuple[Any, ...] = ()


@dataclass(frozen=True)
class ConditionGroup:
    """Predicates joined by `AND` or `OR`, rendered inside parentheses."""

    operator: str
    items: tuple["WhereExpression", ...]


@dataclass(frozen=True)
class NotCondition:
    item: "WhereExpression"


WhereExpression = Condition | RawCondition | ConditionGroup | NotCondition

_EXPRESSION_TYPES = (Condition, RawCondition, ConditionGroup, NotCondition)


def _require_expression(item: Any) -> Any:
    if isinstance(item, _EXPRESSION_TYPES):
        return item
    raise TypeError(
        f"Expected Condition, RawCondition, ConditionGroup or NotCondition, got {type(item).__name__}."
    )


def _group(operator: str, items: tuple[Any, ...]) -> ConditionGroup:
    # C.and_([a, b]) and C.and_(a, b) are equivalent.
    members: Iterable[Any] = items
    if len(items) == 1:
        only = items[0]
        if isinstance(only, SequenceABC) and not isinstance(
            only, (str, bytes, *_EXPRESSION_TYPES)
        ):
            members = only
    flattened = tuple(_require_expression(item) for item in members)
    if not flattened:
        raise ValueError(f"{operator} group needs at least one expression.")
    return ConditionGroup(operator=operator, items=flattened)


class C:
    """Shorthand constructors for predicates.

    Example::

        C.or_(C.lt("views", 10), C.is_null("published_at"))
    """

    @staticmethod
    def eq(col: str, val: Any) -> Condition:
        return Condition(col=col, op="=", value=val)

    @staticmethod
    def ne(col: str, val: Any) -> Condition:
        return Condition(col=col, op="<>", value=val)

    @staticmethod
    def lt(col: str, val: Any) -> Condition:
        return Condition(col=col, op="<", value=val)

    @staticmethod
    def le(col: str, val: Any) -> Condition:
        return Condition(col=col, op="<=", value=val)

    @staticmethod
    def gt(col: str, val: Any) -> Condition:
        return Condition(col=col, op=">", value=val)

    @staticmethod
    def ge(col: str, val: Any) -> Condition:
        return Condition(col=col, op=">=", value=val)

    @staticmethod
    def like(col: str, pattern: str) -> Condition:
        """`col LIKE pattern`, with the wildcards in `pattern` left active."""

        return Condition(col=col, op="LIKE", value=pattern)

    @staticmethod
    def is_null(col: str) -> Condition:
        return Condition(col=col, op="IS NULL", is_unary=True)

    @staticmethod
    def is_not_null(col: str) -> Condition:
        return Condition(col=col, op="IS NOT NULL", is_unary=True)

    @staticmethod
    def in_(col: str, values: Iterable[Any]) -> Condition:
        """`col IN (...)`. An empty collection matches nothing."""

        if isinstance(values, (str, bytes)):
            raise TypeError("in_() takes a collection of values, not a string.")
        return Condition(col=col, op="IN", values=list(values))

    @staticmethod
    def raw(sql: str, params: Sequence[Any] = ()) -> RawCondition:
        """Build a trusted SQL fragment such as `C.raw("age > ?", [18])`.

        The number of `?` markers must match the number of values.
        """

        if not isinstance(sql, str) or not sql.strip():
            raise ValueError("Raw condition SQL must be a non-empty string.")
        values = tuple(params)
        markers = sql.count("?")
        if markers != len(values):
            raise ValueError(f"Raw condition expects {markers} value(s), got {len(values)}.")
        return RawCondition(sql=sql, params=values)

    @staticmethod
    def and_(*items: WhereExpression | Sequence[WhereExpression]) -> ConditionGroup:
        return _group("AND", items)

    @staticmethod
    def or_(*items: WhereExpression | Sequence[WhereExpression]) -> ConditionGroup:
        return _group("OR", items)

    @staticmethod
    def not_(item: WhereExpression) -> NotCondition:
        return NotCondition(item=_require_expression(item))


@dataclass(frozen=True)
class OrderBy:
    """Sort key: a column and its direction."""

    col: str
    desc: bool = False

    @classmethod
    def asc(cls, col: str) -> OrderBy:
        return cls(col=col, desc=False)

    @classmethod
    def descending(cls, col: str) -> OrderBy:
        return cls(col=col, desc=True)
