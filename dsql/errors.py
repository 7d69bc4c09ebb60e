"""Custom exception hierarchy for DSQL.

All public errors inherit from DSQLError so callers can catch the base
class for any DSQL-specific failure.
"""
from __future__ import annotations

from typing import Any


class DSQLError(Exception):
    """Base exception for all DSQL errors."""


class UsageError(DSQLError):
    """Raised when a builder method is called incorrectly.

    Detected at fluent-call time, before anything is rendered, so the
    developer gets the failing call in the traceback.

    Args:
        message: Human-readable description.
        details: Extra context about the offending call.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}


class RenderError(DSQLError):
    """Raised when a clause fragment cannot be rendered.

    Args:
        message: Human-readable description.
        clause: The clause being rendered when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class ConfigError(DSQLError):
    """Raised when a driver or dialect is misconfigured."""


class DriverError(DSQLError):
    """Raised by a driver when the underlying database call fails.

    The original database exception is chained as ``__cause__`` and also
    kept on :attr:`original`.
    """

    def __init__(self, message: str, original: BaseException | None = None) -> None:
        super().__init__(message)
        self.original = original


class StatementError(DSQLError):
    """Raised when executing a rendered statement fails.

    Args:
        message: Names the failed operation (e.g. ``'SELECT statement failed'``).
        kind: Statement type of the builder (``'select'``, ``'insert'``, ...).
        sql: The rendered SQL sent to the driver.
        params: Bind parameters at the time of failure.
        template: The template string, for template-only execution.
        cause: The :class:`DriverError` that triggered this error.
    """

    def __init__(
        self,
        message: str,
        kind: str,
        sql: str,
        params: dict[str, Any],
        template: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.sql = sql
        self.params = params
        self.template = template
        self.cause = cause

    def __str__(self) -> str:
        base = super().__str__()
        if self.cause is not None:
            return f"{base}: {self.cause}"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Returns the error context as a plain dict."""
        return {
            "error": self.args[0],
            "kind": self.kind,
            "sql": self.sql,
            "params": self.params,
            "template": self.template,
            "cause": str(self.cause) if self.cause is not None else None,
        }
