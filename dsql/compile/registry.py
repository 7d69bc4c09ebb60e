"""Dialect and renderer registries (Open/Closed Principle).

``DialectFactory``
    Central registry for :class:`~dsql.compile.base.SQLDialect`
    implementations.  Drivers look dialects up by name, so a new backend
    is one registration away.

``RendererRegistry``
    Maps template tokens (``[where]``, ``[join]`` ...) to clause renderers.
    Every builder copies the registry at construction; a token with no
    renderer is left in the template verbatim, so user templates can carry
    their own tokens and register renderers for them.

Usage::

    from dsql.compile.registry import RendererRegistry

    @RendererRegistry.register("lock")
    def _render_lock(q):
        return "for update" if q.has_option("lock") else ""
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, ClassVar

from dsql.compile.base import SQLDialect
from dsql.errors import ConfigError

if TYPE_CHECKING:
    from dsql.query import DSQL

# ---------------------------------------------------------------------------
# Dialect factory
# ---------------------------------------------------------------------------


class DialectFactory:
    """Registry mapping dialect names to :class:`SQLDialect` classes.

    Example::

        @DialectFactory.register("mariadb")
        class MariaDBDialect(MySQLDialect):
            ...

        dialect = DialectFactory.create("mariadb")
    """

    _dialects: ClassVar[dict[str, type[SQLDialect]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[SQLDialect]], type[SQLDialect]]:
        """Decorator that registers a dialect class under ``name``."""

        def decorator(dialect_cls: type[SQLDialect]) -> type[SQLDialect]:
            cls._dialects[name] = dialect_cls
            return dialect_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, dialect_cls: type[SQLDialect]) -> None:
        """Register a dialect class without using the decorator form."""
        cls._dialects[name] = dialect_cls

    @classmethod
    def create(cls, name: str) -> SQLDialect:
        """Instantiate the dialect registered for ``name``.

        Raises:
            ConfigError: If no dialect is registered for ``name``.
        """
        dialect_cls = cls._dialects.get(name)
        if dialect_cls is None:
            registered = sorted(cls._dialects)
            raise ConfigError(
                f"Unsupported dialect: '{name}'. Registered dialects: {registered}."
            )
        return dialect_cls()

    @classmethod
    def registered_dialects(cls) -> list[str]:
        """Return the sorted list of registered dialect names."""
        return sorted(cls._dialects)


# ---------------------------------------------------------------------------
# Renderer registry
# ---------------------------------------------------------------------------

#: ``(builder) -> sql_fragment``
Renderer = Callable[["DSQL"], str]


class RendererRegistry:
    """Registry mapping template token names to clause renderers."""

    _renderers: ClassVar[dict[str, Renderer]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[Renderer], Renderer]:
        """Decorator that registers a renderer for the ``[name]`` token."""

        def decorator(renderer: Renderer) -> Renderer:
            cls._renderers[name] = renderer
            return renderer

        return decorator

    @classmethod
    def register_renderer(cls, name: str, renderer: Renderer) -> None:
        cls._renderers[name] = renderer

    @classmethod
    def get(cls, name: str) -> Renderer | None:
        return cls._renderers.get(name)

    @classmethod
    def snapshot(cls) -> dict[str, Renderer]:
        """Return a copy of the current token -> renderer mapping."""
        return dict(cls._renderers)

    @classmethod
    def registered_tokens(cls) -> list[str]:
        return sorted(cls._renderers)
