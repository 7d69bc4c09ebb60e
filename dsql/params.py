"""Bind-parameter pool.

Every literal that ends up in a statement goes through a
:class:`ParameterPool`.  A single pool is created per top-level render and
lent to nested builders while they are consumed, so bind names stay unique
across the whole statement, sub-queries included.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import Any

from dsql.errors import RenderError


class _Undefined:
    """Marks an omitted argument.  ``None`` is a real value (SQL NULL)."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Undefined:
        return self

    def __deepcopy__(self, memo: dict) -> _Undefined:
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Any = _Undefined()

_UNSAFE = re.compile(r"[^a-zA-Z0-9_]")
_MANUAL_PLACEHOLDER = re.compile(r"(?<![:\w]):([A-Za-z_][A-Za-z0-9_]*)")


def _default_placeholder(name: str) -> str:
    return f":{name}"


def bind_manual_placeholders(
    template: str, names: Iterable[str], placeholder: Callable[[str], str]
) -> str:
    """Rewrite hand-written ``:name`` placeholders into the driver's style.

    Only names listed in ``names`` are rewritten, so casts such as
    ``::int`` and unrelated colons are left alone.

    Example::

        bind_manual_placeholders("age > :min", ["min"], lambda n: f"%({n})s")
        # 'age > %(min)s'
    """
    known = {name.lstrip(":") for name in names}
    if not known:
        return template

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        return placeholder(name) if name in known else match.group(0)

    return _MANUAL_PLACEHOLDER.sub(_replace, template)


class ParameterPool:
    """Generates unique bind names and stores their values.

    Args:
        values: Initial ``name -> value`` bindings (e.g. manually supplied
            params of a raw expression).  Copied, never aliased.
        placeholder: Turns a bind name into its SQL placeholder.
    """

    def __init__(
        self,
        values: dict[str, Any] | None = None,
        placeholder: Callable[[str], str] = _default_placeholder,
    ) -> None:
        self.values: dict[str, Any] = {}
        self.placeholder = placeholder
        if values:
            self.merge(values)

    def unique_name(self, desired: str) -> str:
        """Return ``desired`` or the first free ``desired_N`` (N >= 2)."""
        desired = _UNSAFE.sub("_", desired) or "a"
        if desired not in self.values:
            return desired
        n = 2
        while f"{desired}_{n}" in self.values:
            n += 1
        return f"{desired}_{n}"

    def escape(self, value: Any, base: str = "a") -> Any:
        """Intern ``value`` and return its placeholder.

        Lists and tuples are interned element-wise and a list of
        placeholders is returned.  ``UNDEFINED`` yields ``""`` and records
        nothing.
        """
        if value is UNDEFINED:
            return ""
        if isinstance(value, (list, tuple)):
            return [self.escape(v, base) for v in value]
        name = self.unique_name(base)
        self.values[name] = value
        return self.placeholder(name)

    def merge(self, values: dict[str, Any]) -> None:
        """Add manually named bindings, e.g. a raw expression's params.

        Raises:
            RenderError: If a name is already bound to a different value.
        """
        for name, value in values.items():
            name = name.lstrip(":")
            if name in self.values and self.values[name] != value:
                raise RenderError(
                    f"Parameter '{name}' is bound to conflicting values.",
                    clause="params",
                )
            self.values[name] = value

    def __len__(self) -> int:
        return len(self.values)

    def __contains__(self, name: object) -> bool:
        return name in self.values
