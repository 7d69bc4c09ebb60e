"""MySQL dialect."""

from __future__ import annotations

from dsql.compile.base import SQLDialect


class MySQLDialect(SQLDialect):
    """MySQL-flavoured rendering.

    Parameter style: ``%(name)s``, compatible with ``PyMySQL`` and
    ``mysql-connector-python`` named-parameter execution.

    Identifiers are quoted with backticks (`` ` ``) rather than double-quotes.
    """

    supports_found_rows = True

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def param_placeholder(self, name: str) -> str:
        return f"%({name})s"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace("`", "``")
        return f"`{escaped}`"

    def render_limit(self, count_sql: str, offset_sql: str | None) -> str:
        if offset_sql is None:
            return f"limit {count_sql}"
        return f"limit {offset_sql}, {count_sql}"
