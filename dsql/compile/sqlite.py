"""SQLite dialect."""
from __future__ import annotations

from dsql.compile.postgres import PostgresDialect


class SQLiteDialect(PostgresDialect):
    """SQLite-flavoured rendering.

    Parameter style: ``:name``, compatible with Python's built-in
    ``sqlite3`` named-parameter execution (``cursor.execute(sql, dict)``).

    Quoting and ``limit ... offset ...`` are shared with PostgreSQL.
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    def param_placeholder(self, name: str) -> str:
        return f":{name}"
