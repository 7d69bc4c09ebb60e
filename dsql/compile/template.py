"""``[token]`` substitution.

A template such as ``select [field] [from] [table] [where]`` is rendered
by replacing each token with the output of a resolver.  A token that
resolves to ``""`` also swallows the single space in front of it, so empty
clauses do not leave double spaces behind.  A token the resolver does not
know (``None``) is kept verbatim.
"""
from __future__ import annotations

import re
from collections.abc import Callable

TOKEN = re.compile(r"( ?)\[([a-z0-9_]*)\]")


def tokens(template: str) -> list[str]:
    """Return the token names referenced by ``template``, in order."""
    return [m.group(2) for m in TOKEN.finditer(template)]


def render_template(template: str, resolve: Callable[[str], str | None]) -> str:
    """Substitute every ``[name]`` in ``template`` with ``resolve(name)``."""

    def _substitute(match: re.Match[str]) -> str:
        space, name = match.group(1), match.group(2)
        rendered = resolve(name)
        if rendered is None:
            return match.group(0)
        if not rendered:
            return ""
        return f"{space}{rendered}"

    return TOKEN.sub(_substitute, template)
