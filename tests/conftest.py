"""Shared pytest fixtures for DSQL unit and integration tests."""
from __future__ import annotations

import sqlite3
from collections.abc import Iterator

import pytest

from dsql.config import DSQLConfig
from dsql.drivers.dbapi import DBAPIDriver
from tests.fixtures import SAMPLE_DDL, RecordingDriver


@pytest.fixture()
def driver() -> RecordingDriver:
    """Recording driver with backtick quoting and ``:name`` placeholders."""
    return RecordingDriver()


@pytest.fixture()
def sqlite_driver() -> Iterator[DBAPIDriver]:
    """DB-API driver on a fresh in-memory SQLite database with sample tables."""
    conn = sqlite3.connect(":memory:")
    conn.executescript(SAMPLE_DDL)
    yield DBAPIDriver(conn, DSQLConfig(dialect="sqlite"))
    conn.close()
