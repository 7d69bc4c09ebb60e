"""DSQL rendering layer: dialects, token registry and clause renderers."""
from dsql.compile import clause_renderers  # noqa: F401  (registers renderers)
from dsql.compile.base import SQLDialect
from dsql.compile.mysql import MySQLDialect
from dsql.compile.postgres import PostgresDialect
from dsql.compile.registry import DialectFactory, RendererRegistry
from dsql.compile.sqlite import SQLiteDialect

DialectFactory.register_class("mysql", MySQLDialect)
DialectFactory.register_class("postgres", PostgresDialect)
DialectFactory.register_class("sqlite", SQLiteDialect)

__all__ = [
    "SQLDialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "DialectFactory",
    "RendererRegistry",
]
