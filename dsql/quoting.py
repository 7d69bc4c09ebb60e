"""Identifier quoting.

Owns the ``table.column`` splitting so that the driver only ever sees
single identifier parts.  Every part is quoted, whatever characters it
holds; raw SQL has to be passed as an expression builder (``q.expr()``).
"""
from __future__ import annotations

from collections.abc import Callable


class IdentifierQuoter:
    """Quotes (possibly dotted) identifiers through a driver callback.

    Args:
        quote_part: Quotes one undotted identifier (usually
            ``driver.quote``).
    """

    def __init__(self, quote_part: Callable[[str], str]) -> None:
        self._quote_part = quote_part

    def __call__(self, identifier: str) -> str:
        return self.quote(identifier)

    def quote(self, identifier: str) -> str:
        """Quote every dotted part of ``identifier``; ``*`` stays bare.

        Examples (with backtick quoting)::

            quote("user")         -> `user`
            quote("u.name")       -> `u`.`name`
            quote("u.*")          -> `u`.*
            quote("order-items")  -> `order-items`
        """
        return ".".join(
            part if part == "*" else self._quote_part(part)
            for part in str(identifier).split(".")
        )
