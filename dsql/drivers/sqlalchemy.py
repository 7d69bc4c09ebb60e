"""Driver running DSQL statements through a SQLAlchemy ``Connection``.

Requires SQLAlchemy (optional dependency)::

    pip install "dsql[sqlalchemy]"

Usage::

    from sqlalchemy import create_engine
    from dsql.drivers.sqlalchemy import SQLAlchemyDriver

    engine = create_engine("sqlite://")
    with engine.connect() as conn:
        driver = SQLAlchemyDriver(conn)
        driver.dsql().table("user").where("id", 1).get()

Statements are executed with :func:`sqlalchemy.text`, so placeholders are
always rendered as ``:name`` and identifier quoting follows the engine's own
identifier preparer.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from dsql.config import DSQLConfig
from dsql.drivers.base import Driver
from dsql.errors import ConfigError, DriverError
from dsql.rows import Rows

if TYPE_CHECKING:
    from sqlalchemy import Connection

logger = structlog.get_logger(__name__)

# SQLAlchemy dialect name -> DSQL dialect name
_DIALECTS: dict[str, str] = {
    "sqlite": "sqlite",
    "mysql": "mysql",
    "mariadb": "mysql",
    "postgresql": "postgres",
}


class SQLAlchemyDriver(Driver):
    """Runs DSQL statements on a SQLAlchemy connection.

    Args:
        connection: An open :class:`sqlalchemy.Connection`.
        config: Shared settings.  ``dialect`` is derived from the
            connection and ``paramstyle`` is forced to ``named``.

    Raises:
        ConfigError: If the connection's dialect has no DSQL counterpart.
    """

    def __init__(self, connection: Connection, config: DSQLConfig | None = None) -> None:
        sa_name = connection.dialect.name
        target = _DIALECTS.get(sa_name)
        if target is None:
            raise ConfigError(
                f"No DSQL dialect for SQLAlchemy dialect '{sa_name}'. "
                f"Supported: {sorted(_DIALECTS)}."
            )
        config = (config or DSQLConfig()).model_copy(
            update={"dialect": target, "paramstyle": "named"}
        )
        super().__init__(config)
        self.connection = connection
        self._preparer = connection.dialect.identifier_preparer
        self._last_insert_id: Any = None

    def quote(self, identifier: str) -> str:
        return self._preparer.quote_identifier(identifier)

    def query(self, sql: str, params: dict[str, Any]) -> Rows:
        try:
            from sqlalchemy import text
            from sqlalchemy.exc import SQLAlchemyError
        except ImportError as exc:
            raise ImportError(
                "SQLAlchemy is required for SQLAlchemyDriver. "
                'Install it with: pip install "dsql[sqlalchemy]"'
            ) from exc

        try:
            result = self.connection.execute(text(sql), params or {})
        except SQLAlchemyError as exc:
            raise DriverError(str(exc), original=exc) from exc

        logger.debug("query_executed", sql=sql, rowcount=result.rowcount)
        if not result.returns_rows:
            self._last_insert_id = result.lastrowid
            return Rows(result, [])
        return Rows(result, list(result.keys()))

    def last_insert_id(self) -> Any:
        return self._last_insert_id
