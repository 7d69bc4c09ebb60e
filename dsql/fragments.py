"""Clause fragments and the keyed store that accumulates them.

Each fluent call on a builder appends one fragment to a named clause.
Fragments are immutable; renderers walk them in insertion order.
"""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from dsql.params import UNDEFINED

#: Join types accepted by :meth:`DSQL.join`.
JOIN_TYPES: frozenset[str] = frozenset({"left", "inner", "right", "full"})


@dataclass(frozen=True)
class TableFragment:
    """A table reference with an optional alias."""

    name: str
    alias: str | None = None


@dataclass(frozen=True)
class FieldFragment:
    """A selected column or expression.

    Attributes:
        expr: Identifier string or nested builder.
        table: Qualifier, applied to identifier strings only.
        alias: Output alias (mandatory for builders).
    """

    expr: Any
    table: str | None = None
    alias: str | None = None


@dataclass(frozen=True)
class Condition:
    """A WHERE / HAVING predicate.

    ``op`` and ``rhs`` are ``UNDEFINED`` when omitted: with both missing the
    ``lhs`` is a self-contained predicate, with only ``op`` missing the
    operator is inferred from ``rhs`` at render time.
    """

    lhs: Any
    op: Any = UNDEFINED
    rhs: Any = UNDEFINED


@dataclass(frozen=True)
class JoinFragment:
    """A single ``<type> join ... on ...`` entry.

    Either ``on`` (a raw expression builder) or both ``master_table`` and
    ``master_field`` are set.
    """

    foreign_table: str
    foreign_field: str = "id"
    join_type: str = "left"
    foreign_alias: str | None = None
    master_table: str | None = None
    master_field: str | None = None
    on: Any = None


@dataclass(frozen=True)
class SetFragment:
    """A ``field = value`` assignment for INSERT / UPDATE / REPLACE."""

    field: Any
    value: Any


@dataclass(frozen=True)
class LimitFragment:
    """Row count and offset."""

    count: int
    offset: int = 0


class ClauseStore:
    """Keyed multimap: clause name -> ordered list of fragments."""

    def __init__(self) -> None:
        self._clauses: dict[str, list[Any]] = {}

    def append(self, clause: str, fragment: Any) -> None:
        self._clauses.setdefault(clause, []).append(fragment)

    def extend(self, clause: str, fragments: list[Any]) -> None:
        self._clauses.setdefault(clause, []).extend(fragments)

    def replace(self, clause: str, fragments: list[Any]) -> None:
        self._clauses[clause] = list(fragments)

    def get(self, clause: str) -> list[Any]:
        return self._clauses.get(clause, [])

    def first(self, clause: str, default: Any = None) -> Any:
        fragments = self._clauses.get(clause)
        return fragments[0] if fragments else default

    def clear(self, clause: str) -> None:
        self._clauses.pop(clause, None)

    def has(self, clause: str) -> bool:
        return bool(self._clauses.get(clause))

    def names(self) -> list[str]:
        return [name for name, fragments in self._clauses.items() if fragments]

    def __contains__(self, clause: object) -> bool:
        return isinstance(clause, str) and self.has(clause)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        return f"ClauseStore({self._clauses!r})"
