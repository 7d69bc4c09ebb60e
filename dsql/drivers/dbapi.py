"""Driver for any DB-API 2.0 connection (``sqlite3``, PyMySQL, psycopg)."""
from __future__ import annotations

from typing import Any

import structlog

from dsql.compile.base import SQLDialect
from dsql.config import DSQLConfig
from dsql.drivers.base import Driver
from dsql.errors import DriverError
from dsql.rows import Rows

logger = structlog.get_logger(__name__)


class DBAPIDriver(Driver):
    """Runs DSQL statements on a DB-API 2.0 connection.

    Pick the dialect (and, if the module's paramstyle differs from the
    dialect default, the ``paramstyle``) to match the connection::

        conn = sqlite3.connect(":memory:")
        driver = DBAPIDriver(conn, DSQLConfig(dialect="sqlite"))

    Args:
        connection: An open DB-API connection.
        config: Shared settings.
        dialect: Explicit dialect instance (overrides ``config.dialect``).
    """

    def __init__(
        self,
        connection: Any,
        config: DSQLConfig | None = None,
        dialect: SQLDialect | None = None,
    ) -> None:
        super().__init__(config, dialect)
        self.connection = connection
        self._error_cls: type[BaseException] = getattr(connection, "Error", Exception)
        self._last_insert_id: Any = None

    def query(self, sql: str, params: dict[str, Any]) -> Rows:
        cursor = self.connection.cursor()
        try:
            if params:
                cursor.execute(sql, params)
            else:
                cursor.execute(sql)
        except self._error_cls as exc:
            cursor.close()
            raise DriverError(str(exc), original=exc) from exc

        self._last_insert_id = getattr(cursor, "lastrowid", None)
        columns = [col[0] for col in cursor.description or ()]
        logger.debug("query_executed", sql=sql, rowcount=cursor.rowcount)
        return Rows(cursor, columns)

    def last_insert_id(self) -> Any:
        return self._last_insert_id
