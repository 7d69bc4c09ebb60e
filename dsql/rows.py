"""Result cursor wrapper.

``Rows`` owns the driver cursor of one executed statement and exposes the
fetch modes DSQL needs: mapping, positional and scalar.  The end of the
result set is signalled with ``None``.
"""
from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any


class Rows:
    """Streams rows from an executed statement.

    Args:
        cursor: Any object with ``fetchone()`` returning a sequence or
            ``None`` (DB-API cursor, SQLAlchemy ``CursorResult``).
        columns: Result column names, in order.  Empty for statements that
            return no rows.
    """

    def __init__(self, cursor: Any, columns: Sequence[str]) -> None:
        self._cursor = cursor
        self.columns: list[str] = list(columns)
        self.closed = False

    def fetch_row(self) -> list[Any] | None:
        """Advance one row and return it as a positional list."""
        if self.closed or not self.columns:
            return None
        row = self._cursor.fetchone()
        if row is None:
            return None
        return list(row)

    def fetch(self) -> dict[str, Any] | None:
        """Advance one row and return it as a ``column -> value`` mapping."""
        row = self.fetch_row()
        if row is None:
            return None
        return dict(zip(self.columns, row))

    def fetch_all(self) -> list[dict[str, Any]]:
        """Return every remaining row as a mapping."""
        return list(self)

    def fetch_one(self) -> Any:
        """Return the first column of the next row, or ``None``."""
        row = self.fetch_row()
        return row[0] if row else None

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        close = getattr(self._cursor, "close", None)
        if close is not None:
            close()

    def __iter__(self) -> Iterator[dict[str, Any]]:
        while True:
            row = self.fetch()
            if row is None:
                return
            yield row

    def __enter__(self) -> Rows:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
