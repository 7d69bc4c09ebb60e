"""DSQL: composable, parameter-safe dynamic SQL.

Build statements from fluent clause calls; literals always travel as bind
parameters, never inside the SQL text.

Public API
----------
``DSQL``
    The query builder.  Obtain one from a driver with ``driver.dsql()``.

``DBAPIDriver``
    Runs builders on any DB-API 2.0 connection (``sqlite3``, PyMySQL,
    psycopg).  ``SQLAlchemyDriver`` (in :mod:`dsql.drivers.sqlalchemy`)
    does the same for a SQLAlchemy connection.

``DSQLConfig``
    Dialect, bind-name prefix, placeholder style and debug logging.

Example::

    import sqlite3
    from dsql import DBAPIDriver, DSQLConfig

    driver = DBAPIDriver(sqlite3.connect("app.db"), DSQLConfig(dialect="sqlite"))
    q = driver.dsql().table("user").field("name").where("age", ">", 18)
    for row in q:
        print(row["name"])

Extensibility
-------------
New dialects are registered with
:class:`~dsql.compile.registry.DialectFactory`; new template tokens with
:class:`~dsql.compile.registry.RendererRegistry` (globally) or
:meth:`DSQL.renderer` (per builder).
"""

from __future__ import annotations

from dsql.compile import (
    DialectFactory,
    MySQLDialect,
    PostgresDialect,
    RendererRegistry,
    SQLDialect,
    SQLiteDialect,
)
from dsql.config import DSQLConfig
from dsql.drivers import DBAPIDriver, Driver
from dsql.errors import (
    ConfigError,
    DriverError,
    DSQLError,
    RenderError,
    StatementError,
    UsageError,
)
from dsql.params import UNDEFINED, ParameterPool
from dsql.query import DSQL, MULTIPLE_TABLES, StatementType
from dsql.rows import Rows

__all__ = [
    # Builder
    "DSQL",
    "StatementType",
    "MULTIPLE_TABLES",
    "UNDEFINED",
    "ParameterPool",
    "Rows",
    # Drivers and configuration
    "Driver",
    "DBAPIDriver",
    "DSQLConfig",
    # Dialects
    "SQLDialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "DialectFactory",
    "RendererRegistry",
    # Errors
    "DSQLError",
    "UsageError",
    "RenderError",
    "DriverError",
    "StatementError",
    "ConfigError",
]
