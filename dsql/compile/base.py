"""Dialect abstraction: the SQLDialect ABC.

The Strategy pattern is used:
- ``SQLDialect`` declares the dialect-specific steps a builder needs while
  rendering (identifier quoting, placeholder style, LIMIT syntax).
- ``MySQLDialect``, ``PostgresDialect`` and ``SQLiteDialect`` implement them.
"""
from __future__ import annotations

from abc import ABC, abstractmethod


class SQLDialect(ABC):
    """Abstract base for dialect-specific rendering steps.

    Drivers own a dialect and expose its steps through the driver contract,
    so builders never talk to a dialect directly.
    """

    #: Whether ``SQL_CALC_FOUND_ROWS`` / ``found_rows()`` is available.
    supports_found_rows: bool = False

    @abstractmethod
    def param_placeholder(self, name: str) -> str:
        """Return the SQL placeholder string for a named parameter.

        Args:
            name: Bind name without prefix (e.g. ``'a'``, ``'a_2'``).

        Returns:
            Dialect-specific placeholder string.
        """

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Return a properly-quoted SQL identifier.

        Args:
            name: Unquoted, undotted identifier.

        Returns:
            Quoted identifier.
        """

    @abstractmethod
    def render_limit(self, count_sql: str, offset_sql: str | None) -> str:
        """Return the row-limiting clause.

        Args:
            count_sql: Placeholder holding the row count.
            offset_sql: Placeholder holding the offset, or ``None`` for no
                offset.
        """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (``'mysql'``, ``'sqlite'`` ...)."""
