"""The driver contract DSQL relies on.

A driver wraps one database connection and is shared by every builder it
creates.  Builders only ever call the methods declared here: identifier
quoting, placeholder rendering, LIMIT rendering, query execution and the
last insert id.  Dialect-specific behaviour is delegated to the injected
:class:`~dsql.compile.base.SQLDialect`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from dsql.compile.base import SQLDialect
from dsql.compile.registry import DialectFactory
from dsql.config import DSQLConfig
from dsql.query import DSQL
from dsql.rows import Rows


class Driver(ABC):
    """Abstract base for database drivers.

    Args:
        config: Shared settings; defaults to ``DSQLConfig()``.
        dialect: Explicit dialect instance.  Defaults to the dialect
            registered under ``config.dialect``.
    """

    def __init__(
        self,
        config: DSQLConfig | None = None,
        dialect: SQLDialect | None = None,
    ) -> None:
        self.config = config or DSQLConfig()
        self.dialect = dialect or DialectFactory.create(self.config.dialect)

    # ------------------------------------------------------------------
    # Builder factories
    # ------------------------------------------------------------------

    def dsql(self, cls: type[DSQL] | None = None) -> DSQL:
        """Create a fresh builder bound to this driver."""
        return (cls or DSQL)(self)

    def expr(self, template: str, params: dict[str, Any] | None = None) -> DSQL:
        """Create a raw expression builder bound to this driver."""
        return self.dsql().use_expr(template, params)

    # ------------------------------------------------------------------
    # Rendering hooks
    # ------------------------------------------------------------------

    def quote(self, identifier: str) -> str:
        """Quote a single, undotted identifier."""
        return self.dialect.quote_identifier(identifier)

    def param_placeholder(self, name: str) -> str:
        style = self.config.paramstyle
        if style == "named":
            return f":{name}"
        if style == "pyformat":
            return f"%({name})s"
        return self.dialect.param_placeholder(name)

    def render_limit(self, count_sql: str, offset_sql: str | None) -> str:
        return self.dialect.render_limit(count_sql, offset_sql)

    @property
    def supports_found_rows(self) -> bool:
        return self.dialect.supports_found_rows

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    @abstractmethod
    def query(self, sql: str, params: dict[str, Any]) -> Rows:
        """Execute ``sql`` with named ``params`` and return its rows.

        Raises:
            DriverError: If the database rejects the statement.
        """

    @abstractmethod
    def last_insert_id(self) -> Any:
        """Return the id generated by the most recent INSERT."""

    def get_one(self, sql: str, params: dict[str, Any] | None = None) -> Any:
        """Execute ``sql`` and return the first column of the first row."""
        with self.query(sql, params or {}) as rows:
            return rows.fetch_one()
