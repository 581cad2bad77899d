"""Shared core type aliases used across contracts, services, and ports."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

NamedParams = Dict[str, Any]
PositionalParams = List[Any]
QueryParams = Union[NamedParams, PositionalParams, None]

Record = Dict[str, Any]
RowMapping = Mapping[str, Any]
Rows = List[Record]
MaybeRow = Optional[Record]
