"""Pydantic model for driver / builder configuration.

A ``DSQLConfig`` is handed to a driver once; every builder the driver
creates inherits ``param_base`` and ``debug`` from it::

    from dsql import DBAPIDriver, DSQLConfig

    driver = DBAPIDriver(conn, DSQLConfig(dialect="sqlite", debug=True))
    rows = driver.dsql().table("user").where("id", 1).get()
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

#: Dialects shipped with DSQL.
DialectTarget = Literal["mysql", "postgres", "sqlite"]

#: DB-API placeholder styles DSQL can render.
ParamStyle = Literal["named", "pyformat"]


class DSQLConfig(BaseModel):
    """Settings shared by a driver and the builders it creates.

    Attributes:
        dialect: Target SQL dialect (quoting, placeholders, LIMIT syntax).
        param_base: Prefix for generated bind names (``a``, ``a_2`` ...).
        paramstyle: Overrides the dialect's placeholder style; ``named``
            renders ``:name``, ``pyformat`` renders ``%(name)s``.
        debug: Log every rendered statement.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    dialect: DialectTarget = "mysql"
    param_base: str = Field(default="a", pattern=r"^[A-Za-z][A-Za-z0-9_]*$")
    paramstyle: ParamStyle | None = None
    debug: bool = False
