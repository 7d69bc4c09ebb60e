"""Test fixtures: a recording driver and sample DDL."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from dsql.config import DSQLConfig
from dsql.drivers.base import Driver
from dsql.errors import DriverError
from dsql.rows import Rows

SAMPLE_DDL = """
CREATE TABLE dept (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL
);
CREATE TABLE user (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    age INTEGER,
    dept_id INTEGER REFERENCES dept(id)
);
"""


class FakeCursor:
    """Minimal cursor handing out canned rows."""

    def __init__(self, rows: Sequence[Sequence[Any]]) -> None:
        self._rows = [tuple(r) for r in rows]
        self.closed = False

    def fetchone(self) -> tuple | None:
        if not self._rows:
            return None
        return self._rows.pop(0)

    def close(self) -> None:
        self.closed = True


class RecordingDriver(Driver):
    """Driver that records every query and answers with canned rows.

    Quotes with backticks (MySQL dialect) and renders ``:name``
    placeholders, matching the examples in the documentation.
    """

    def __init__(self, config: DSQLConfig | None = None) -> None:
        super().__init__(config or DSQLConfig(dialect="mysql", paramstyle="named"))
        self.queries: list[tuple[str, dict[str, Any]]] = []
        self.columns: list[str] = []
        self.rows: list[Sequence[Any]] = []
        self.error: DriverError | None = None
        self.insert_id: Any = 42
        self.cursors: list[FakeCursor] = []

    def returns(self, columns: list[str], rows: list[Sequence[Any]]) -> RecordingDriver:
        self.columns = columns
        self.rows = rows
        return self

    def query(self, sql: str, params: dict[str, Any]) -> Rows:
        self.queries.append((sql, dict(params)))
        if self.error is not None:
            raise self.error
        cursor = FakeCursor(self.rows)
        self.cursors.append(cursor)
        return Rows(cursor, self.columns)

    def last_insert_id(self) -> Any:
        return self.insert_id

    @property
    def last_query(self) -> tuple[str, dict[str, Any]]:
        return self.queries[-1]
