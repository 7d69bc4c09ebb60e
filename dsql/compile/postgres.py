"""PostgreSQL dialect."""

from __future__ import annotations

from dsql.compile.base import SQLDialect


class PostgresDialect(SQLDialect):
    """PostgreSQL-flavoured rendering.

    Parameter style: ``%(name)s``, compatible with ``psycopg2`` and
    ``psycopg`` named-parameter execution.
    """

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def param_placeholder(self, name: str) -> str:
        return f"%({name})s"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def render_limit(self, count_sql: str, offset_sql: str | None) -> str:
        if offset_sql is None:
            return f"limit {count_sql}"
        return f"limit {count_sql} offset {offset_sql}"
