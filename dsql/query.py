"""The dynamic query builder.

A :class:`DSQL` instance accumulates clause fragments through fluent calls,
renders them through a template of ``[token]`` placeholders and executes
the result on its driver::

    q = driver.dsql().table("user").where("id", 1)
    q.render()   # select * from `user` where `id` = :a
    q.params     # {"a": 1}
    q.get()      # [{"id": 1, "name": "bob"}]

Rendering
---------
``render()`` resets the parameter pool to the manual ``extra_params`` of the
builder and of every builder nested in it, then substitutes every template
token with the output of its renderer (see
:mod:`dsql.compile.clause_renderers`).  Literals never appear in the SQL:
they are interned in the pool and replaced by bind placeholders.
Hand-written ``:name`` placeholders of raw expressions are rewritten into
the driver's placeholder style.

Sub-queries
-----------
A builder used as a value inside another builder is rendered through
:meth:`DSQL.consume`, which lends it the parent's pool for the duration of
the render.  Bind names are therefore unique across the whole statement,
and the nested builder stays reusable afterwards.
"""
from __future__ import annotations

import copy
import dataclasses
import re
from collections.abc import Iterator
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog

from dsql.compile.registry import Renderer, RendererRegistry
from dsql.compile.template import render_template
from dsql.errors import DriverError, StatementError, UsageError
from dsql.fragments import (
    JOIN_TYPES,
    ClauseStore,
    Condition,
    FieldFragment,
    JoinFragment,
    LimitFragment,
    SetFragment,
    TableFragment,
)
from dsql.params import UNDEFINED, ParameterPool, bind_manual_placeholders
from dsql.quoting import IdentifierQuoter
from dsql.rows import Rows

if TYPE_CHECKING:
    from dsql.drivers.base import Driver

logger = structlog.get_logger(__name__)


class StatementType(str, Enum):
    """Kind of statement a builder renders."""

    UNSET = "unset"
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    REPLACE = "replace"
    CALL = "call"
    DESCRIBE = "describe"
    EXPR = "expr"


class _MultipleTables:
    def __repr__(self) -> str:
        return "MULTIPLE_TABLES"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _MultipleTables:
        return self

    def __deepcopy__(self, memo: dict) -> _MultipleTables:
        return self


#: Value of :attr:`DSQL.main_table` once more than one table is queried.
MULTIPLE_TABLES: Any = _MultipleTables()

TEMPLATES: dict[StatementType, str] = {
    StatementType.SELECT: (
        "select [options] [field] [from] [table] [join] [where] [group] [having] [order] [limit]"
    ),
    StatementType.INSERT: (
        "insert [options_insert] into [table_noalias] ([set_fields]) values ([set_values])"
    ),
    StatementType.UPDATE: "update [table_noalias] set [set] [where]",
    StatementType.DELETE: "delete from [table_noalias] [where]",
    StatementType.REPLACE: (
        "replace [options_replace] into [table_noalias] ([set_fields]) values ([set_values])"
    ),
    StatementType.CALL: "call [fx]([args])",
    StatementType.DESCRIBE: "describe [table]",
}

_PLAIN_FIELD = re.compile(r"^[a-zA-Z0-9_.]*$")
_FIELD_WITH_OP = re.compile(r"^([^ <>!=]*)([><!=]*|( *(not|is|in|like))*) *$")


class DSQL:
    """Composable, parameter-safe SQL statement builder.

    Builders are created by a driver (``driver.dsql()``) or by another
    builder (``q.dsql()``, ``q.expr(...)``) and share that driver.

    Args:
        owner: The driver used for quoting, placeholders and execution.

    Attributes:
        args: Accumulated clause fragments.
        template: Template rendered by :meth:`render`; installed by the
            statement selectors, defaults to the SELECT template.
        extra_params: Manually named bindings of a raw expression.
        main_table: ``None``, the single table (or its alias), or
            :data:`MULTIPLE_TABLES`.
        type: The :class:`StatementType` selected last.
        cursor: :class:`~dsql.rows.Rows` of the last execution.
        debug_enabled: Log every rendered statement (see :meth:`debug`).
    """

    def __init__(self, owner: Driver) -> None:
        self.owner = owner
        self.args = ClauseStore()
        self.template: str | None = None
        self.extra_params: dict[str, Any] = {}
        self.main_table: Any = None
        self.type = StatementType.UNSET
        self.cursor: Rows | None = None
        config = getattr(owner, "config", None)
        self.debug_enabled: bool = bool(getattr(config, "debug", False))
        self._param_base: str = getattr(config, "param_base", "a")
        self._quoter = IdentifierQuoter(owner.quote)
        self._renderers: dict[str, Renderer] = RendererRegistry.snapshot()
        self._pool = self._new_pool()

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------

    @staticmethod
    def is_query(value: Any) -> bool:
        """True if ``value`` is a builder (sub-query or raw expression)."""
        return isinstance(value, DSQL)

    @property
    def params(self) -> dict[str, Any]:
        """Bind name -> value, as collected by the last render."""
        return self._pool.values

    def _new_pool(self, values: dict[str, Any] | None = None) -> ParameterPool:
        return ParameterPool(values, placeholder=self.owner.param_placeholder)

    def quote(self, identifier: str) -> str:
        """Quote a (possibly dotted) identifier through the driver."""
        return self._quoter.quote(identifier)

    def escape(self, value: Any) -> Any:
        """Intern ``value`` as a bind parameter and return its placeholder.

        Lists yield a list of placeholders; ``UNDEFINED`` yields ``""``.
        Only meaningful while rendering.
        """
        return self._pool.escape(value, self._param_base)

    def param_base(self, base: str) -> DSQL:
        """Change the prefix of generated bind names (``a``, ``a_2`` ...)."""
        self._param_base = base
        return self

    def dsql(self) -> DSQL:
        """Create a fresh builder on the same driver, e.g. for a sub-query."""
        return type(self)(self.owner)

    def consume(self, value: Any, quote: bool = True) -> str:
        """Render ``value`` into this builder's output.

        Builders are rendered with this builder's parameter pool and
        parenthesised when they are SELECT statements.  Strings are quoted
        as identifiers unless ``quote`` is false.
        """
        if value is UNDEFINED or value is None:
            return ""
        if not isinstance(value, DSQL):
            return self.quote(value) if quote else str(value)

        is_select = value.is_select()
        value._pool = self._pool
        try:
            self._pool.merge(value.extra_params)
            sql = value._render()
        finally:
            value._pool = value._new_pool()
        if is_select:
            sql = f"({sql})"
        return sql

    def clear(self, clause: str) -> DSQL:
        """Remove every fragment of ``clause`` (``q.clear('where')``)."""
        self.args.clear(clause)
        return self

    def clone(self) -> DSQL:
        """Return an independent copy sharing only the driver.

        Clauses, nested builders included, are deep-copied; the cursor is
        not carried over.
        """
        return copy.deepcopy(self)

    def __deepcopy__(self, memo: dict[int, Any]) -> DSQL:
        dup = copy.copy(self)
        memo[id(self)] = dup
        dup.args = copy.deepcopy(self.args, memo)
        dup.extra_params = copy.deepcopy(self.extra_params, memo)
        dup._renderers = dict(self._renderers)
        dup._pool = dup._new_pool()
        dup.cursor = None
        return dup

    def renderer(self, token: str, fn: Renderer) -> DSQL:
        """Register a renderer for ``[token]`` on this builder only."""
        self._renderers[token] = fn
        return self

    def use_template(self, template: str) -> DSQL:
        """Explicitly set the template to render."""
        self.template = template
        return self

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def expr(self, template: str, params: dict[str, Any] | None = None) -> DSQL:
        """Return a new raw expression builder emitting ``template``.

        ``params`` holds bindings for placeholders written into the
        template by hand, e.g. ``q.expr("age > :min", {"min": 18})``.
        """
        return self.dsql().use_expr(template, params)

    def or_expr(self) -> DSQL:
        """Return an expression joining its ``where()`` conditions with ``or``."""
        return self.expr("([orwhere])")

    def use_expr(self, template: str, params: dict[str, Any] | None = None) -> DSQL:
        """Turn this builder into a raw expression."""
        self.type = StatementType.EXPR
        self.template = template
        self.extra_params = dict(params or {})
        return self

    def get_field(self, field: str) -> DSQL:
        """Return an expression referencing ``field`` of the main table.

        Useful to correlate a sub-query with its parent.

        Raises:
            UsageError: If no table, or more than one table, is queried.
        """
        if self.main_table is MULTIPLE_TABLES:
            raise UsageError(
                "Cannot use get_field() when multiple tables are queried",
                details={"field": field},
            )
        if self.main_table is None:
            raise UsageError("Cannot use get_field() before table()", details={"field": field})
        return self.expr(f"{self.quote(self.main_table)}.{self.quote(field)}")

    # ------------------------------------------------------------------
    # table()
    # ------------------------------------------------------------------

    def table(self, table: Any = UNDEFINED, alias: str | None = None) -> Any:
        """Add a table to the query.

        Examples::

            q.table("user")
            q.table("user", "u")
            q.table("user").table("salary")
            q.table(["user", "salary"])
            q.table({"u": "user", "s": "salary"})

        Without arguments the current main table is returned: the table
        name (or alias) when exactly one table was added,
        :data:`MULTIPLE_TABLES` otherwise, ``None`` if none.
        """
        if table is UNDEFINED:
            return self.main_table

        if isinstance(table, dict):
            for key, name in table.items():
                self.table(name, key)
            return self
        if isinstance(table, (list, tuple)):
            for name in table:
                self.table(name)
            return self

        if self.main_table is None:
            self.main_table = alias or table
        elif self.main_table is not MULTIPLE_TABLES:
            self.main_table = MULTIPLE_TABLES

        self.args.append("table", TableFragment(table, alias or None))
        return self

    # ------------------------------------------------------------------
    # field()
    # ------------------------------------------------------------------

    def field(self, field: Any, table: str | None = None, alias: str | None = None) -> DSQL:
        """Add a column or expression to the select list.

        Examples::

            q.field("name")
            q.field("name", "user")                  # `user`.`name`
            q.field("name,surname")
            q.field({"n": "name", "s": "surname"})   # keys are aliases
            q.field(q.expr("2+2"), "four")           # expressions need an alias
            q.field(q.dsql().table("x").field("y"), "sub")

        Raises:
            UsageError: If an expression or sub-query has no alias.
        """
        if isinstance(field, dict):
            for key, value in field.items():
                self.field(value, table, key)
            return self
        if isinstance(field, (list, tuple)):
            for value in field:
                self.field(value, table)
            return self
        if isinstance(field, str) and "," in field:
            for part in field.split(","):
                self.field(part.strip(), table, alias)
            return self

        if isinstance(field, DSQL):
            if alias is None:
                if not table:
                    raise UsageError("Specified expression without alias")
                alias, table = table, None
            else:
                table = None

        self.args.append("fields", FieldFragment(field, table, alias))
        return self

    # ------------------------------------------------------------------
    # where() and having()
    # ------------------------------------------------------------------

    def where(
        self,
        field: Any,
        cond: Any = UNDEFINED,
        value: Any = UNDEFINED,
        kind: str = "where",
    ) -> DSQL:
        """Add a condition.

        Examples::

            q.where("id", 1)
            q.where("id>", 1)
            q.where("id", ">", 1)
            q.where("id", [1, 2, 3])                 # in (...)
            q.where(q.expr("a=b"))
            q.where("date>", q.expr("now()"))
            q.where(q.expr("length(password)"), ">", 5)
            q.where("dept_id", q.dsql().table("dept").field("id"))
            q.where(q.or_expr().where("a", 1).where("b", 1))
            q.where(["a is null", "b is null"])      # or-ed
        """
        if isinstance(field, (list, tuple)):
            or_expr = self.or_expr()
            for row in field:
                if isinstance(row, (list, tuple)):
                    or_expr.where(*row[:3])
                elif isinstance(row, DSQL):
                    or_expr.where(row)
                else:
                    or_expr.where(or_expr.expr(row))
            field = or_expr

        if isinstance(field, str) and not _PLAIN_FIELD.match(field):
            match = _FIELD_WITH_OP.match(field)
            op = match.group(2).strip() if match else ""
            if op:
                if cond is UNDEFINED:
                    raise UsageError(
                        "Specify value for condition", details={"field": field}
                    )
                field, cond, value = match.group(1), op, cond
            else:
                field = self.expr(field)

        if value is UNDEFINED:
            cond, value = UNDEFINED, cond

        self.args.append(kind, Condition(field, cond, value))
        return self

    def having(self, field: Any, cond: Any = UNDEFINED, value: Any = UNDEFINED) -> DSQL:
        """Add a HAVING condition; accepts the same shapes as :meth:`where`."""
        return self.where(field, cond, value, "having")

    # ------------------------------------------------------------------
    # join()
    # ------------------------------------------------------------------

    def join(
        self,
        foreign_table: Any,
        master: Any = None,
        join_type: str | None = None,
        foreign_alias: str | None = None,
    ) -> DSQL:
        """Join another table.

        Examples::

            q.join("address")                 # address.id = <main>.address_id
            q.join("address.user_id")         # address.user_id = <main>.id
            q.join({"a": "address"})          # aliased
            q.join("address.code", "code")    # address.code = <main>.code
            q.join("address.code", "user.code", "inner")
            q.join("address", q.expr("address.id = user.addr_id"))

        Raises:
            UsageError: For an unknown join type, or when the master table
                has to be inferred but the query has no single main table.
        """
        if isinstance(foreign_table, dict):
            for alias, foreign in foreign_table.items():
                self.join(foreign, master, join_type, alias)
            return self
        if isinstance(foreign_table, (list, tuple)):
            for foreign in foreign_table:
                self.join(foreign, master, join_type)
            return self

        join_type = (join_type or "left").lower()
        if join_type not in JOIN_TYPES:
            raise UsageError(
                f"Unsupported join type '{join_type}'",
                details={"allowed": sorted(JOIN_TYPES)},
            )

        f1, _, f2 = str(foreign_table).partition(".")
        foreign_field = f2 or None

        if isinstance(master, DSQL):
            fragment = JoinFragment(
                foreign_table=f1,
                foreign_field=foreign_field or "id",
                join_type=join_type,
                foreign_alias=foreign_alias,
                on=master,
            )
            self.args.append("join", fragment)
            return self

        m1: str | None = None
        m2: str | None = None
        if master is not None:
            head, dot, tail = str(master).partition(".")
            m1, m2 = (head, tail) if dot else (None, head)
        if m1 is None:
            if self.main_table is None or self.main_table is MULTIPLE_TABLES:
                raise UsageError(
                    "Cannot infer master table for join",
                    details={"foreign_table": foreign_table},
                )
            m1 = self.main_table
        if m2 is None:
            m2 = f"{f1}_id" if foreign_field is None else "id"

        fragment = JoinFragment(
            foreign_table=f1,
            foreign_field=foreign_field or "id",
            join_type=join_type,
            foreign_alias=foreign_alias,
            master_table=m1,
            master_field=m2,
        )
        self.args.append("join", fragment)
        return self

    # ------------------------------------------------------------------
    # group(), order(), option(), args(), limit(), set()
    # ------------------------------------------------------------------

    def _set_array(self, values: Any, clause: str, parse_commas: bool = True) -> DSQL:
        if isinstance(values, str) and parse_commas and "," in values:
            values = [v.strip() for v in values.split(",")]
        if not isinstance(values, (list, tuple)):
            values = [values]
        self.args.extend(clause, list(values))
        return self

    def group(self, group: Any) -> DSQL:
        return self._set_array(group, "group")

    def order(self, order: Any, desc: bool = False) -> DSQL:
        """Add ordering; ``desc=True`` appends `` desc``."""
        if desc and isinstance(order, str):
            order = f"{order} desc"
        return self._set_array(order, "order")

    def option(self, option: Any) -> DSQL:
        """Add a SELECT modifier, e.g. ``distinct`` or ``SQL_CALC_FOUND_ROWS``."""
        return self._set_array(option, "options")

    def option_insert(self, option: Any) -> DSQL:
        return self._set_array(option, "options_insert")

    def option_replace(self, option: Any) -> DSQL:
        return self._set_array(option, "options_replace")

    def ignore(self) -> DSQL:
        """Render ``insert ignore``."""
        return self.option_insert("ignore")

    def has_option(self, option: str) -> bool:
        return option in self.args.get("options")

    def calc_found_rows(self) -> DSQL:
        """Ask MySQL to count rows ignoring LIMIT, see :meth:`found_rows`.

        A no-op on drivers without ``found_rows()`` support.
        """
        if not self.owner.supports_found_rows:
            return self
        return self.option("SQL_CALC_FOUND_ROWS")

    def arguments(self, args: Any) -> DSQL:
        """Set arguments for :meth:`call`."""
        return self._set_array(args, "args", parse_commas=False)

    def limit(self, count: Any, offset: Any = 0) -> DSQL:
        """Limit the result to ``count`` rows starting at ``offset``.

        Raises:
            UsageError: If either value is not an integer.
        """
        try:
            fragment = LimitFragment(int(count), int(offset or 0))
        except (TypeError, ValueError) as exc:
            raise UsageError(
                "limit() expects integers", details={"count": count, "offset": offset}
            ) from exc
        self.args.replace("limit", [fragment])
        return self

    def set(self, field: Any, value: Any = UNDEFINED) -> DSQL:
        """Assign a value for INSERT / UPDATE / REPLACE.

        Examples::

            q.set("name", "bob")
            q.set({"name": "bob", "age": 30})
            q.set("updated", q.expr("now()"))

        Raises:
            UsageError: If no value is given.
        """
        if isinstance(field, dict):
            for key, val in field.items():
                self.set(key, val)
            return self

        if value is UNDEFINED:
            raise UsageError("Specify value when calling set()", details={"field": field})

        assignments = self.args.get("set")
        for i, assignment in enumerate(assignments):
            if assignment.field is field or assignment.field == field:
                assignments[i] = SetFragment(field, value)
                return self
        self.args.append("set", SetFragment(field, value))
        return self

    # ------------------------------------------------------------------
    # Statement selectors
    # ------------------------------------------------------------------

    def _select_statement(self, kind: StatementType) -> DSQL:
        self.type = kind
        self.template = TEMPLATES[kind]
        return self

    def select(self) -> DSQL:
        return self._select_statement(StatementType.SELECT)

    def insert(self) -> DSQL:
        return self._select_statement(StatementType.INSERT)

    def update(self) -> DSQL:
        return self._select_statement(StatementType.UPDATE)

    def delete(self) -> DSQL:
        return self._select_statement(StatementType.DELETE)

    def replace(self) -> DSQL:
        return self._select_statement(StatementType.REPLACE)

    def call(self, fx: str, args: Any = None) -> DSQL:
        """Call stored procedure ``fx`` with ``args``."""
        self.args.replace("fx", [fx])
        if args is not None:
            self.arguments(args)
        return self._select_statement(StatementType.CALL)

    def describe(self, table: str) -> DSQL:
        return self.table(table)._select_statement(StatementType.DESCRIBE)

    def is_select(self) -> bool:
        """True for SELECT builders, including ones not rendered yet."""
        if self.type is StatementType.UNSET:
            return self.template is None
        return self.type is StatementType.SELECT

    def is_insert(self) -> bool:
        return self.type is StatementType.INSERT

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def debug(self, enabled: bool = True) -> DSQL:
        """Log every rendered statement."""
        self.debug_enabled = enabled
        return self

    def render(self) -> str:
        """Render the template and collect bind parameters into :attr:`params`."""
        return self._render_top(self.template)

    def _render_top(self, template: str | None) -> str:
        # Manual names are reserved up front so generated names skip them.
        self._pool = self._new_pool(self.extra_params)
        for nested in self._nested():
            self._pool.merge(nested.extra_params)
        sql = self._render(template)
        if self.debug_enabled:
            logger.debug("dsql_render", sql=sql, params=dict(self.params))
        return sql

    def _render(self, template: str | None = None) -> str:
        if template is None:
            if self.template is None:
                self.select()
            template = self.template
        if self.extra_params:
            template = bind_manual_placeholders(
                template, self.extra_params, self.owner.param_placeholder
            )
        return render_template(template, self._render_token)

    def _nested(self) -> Iterator[DSQL]:
        """Yield every builder nested in this builder's clauses, recursively."""
        for clause in self.args:
            for fragment in self.args.get(clause):
                yield from _builders_in(fragment)

    def _render_token(self, name: str) -> str | None:
        renderer = self._renderers.get(name)
        if renderer is None:
            return None
        return renderer(self)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.type.value} tables={self.args.get('table')!r}>"

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _query(self, message: str, template: str | None = None) -> Rows:
        sql = self._render_top(template)
        params = dict(self.params)
        self.rewind()
        try:
            return self.owner.query(sql, params)
        except DriverError as exc:
            logger.error(
                "statement_failed", error=message, sql=sql, params=params, cause=str(exc)
            )
            raise StatementError(
                message,
                kind=self.type.value,
                sql=sql,
                params=params,
                template=template,
                cause=exc,
            ) from exc

    def _run(self, message: str, template: str | None = None) -> DSQL:
        self.cursor = self._query(message, template)
        return self

    def _failure_message(self) -> str:
        if self.type in (StatementType.UNSET, StatementType.EXPR):
            return "SELECT or expression failed"
        return f"{self.type.value.upper()} statement failed"

    def execute(self) -> DSQL:
        """Render and run the current template; rows are in :attr:`cursor`.

        Raises:
            StatementError: If the driver rejects the statement.
        """
        return self._run(self._failure_message())

    def run_template(self, template: str) -> DSQL:
        """Render ``template`` against this builder's clauses and run it."""
        return self._run("Custom template execution failed", template=template)

    def do_select(self) -> DSQL:
        return self.select()._run("SELECT statement failed")

    def do_insert(self) -> Any:
        """Run an INSERT and return the id it generated."""
        self.insert()._run("INSERT statement failed")
        return self.owner.last_insert_id()

    def do_update(self) -> DSQL:
        return self.update()._run("UPDATE statement failed")

    def do_delete(self) -> DSQL:
        return self.delete()._run("DELETE statement failed")

    def do_replace(self) -> DSQL:
        return self.replace()._run("REPLACE statement failed")

    def do_call(self, fx: str, args: Any = None) -> DSQL:
        return self.call(fx, args)._run("CALL statement failed")

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _rows(self) -> Rows:
        if self.cursor is None:
            self.cursor = self._query(self._failure_message())
        return self.cursor

    def get(self) -> list[dict[str, Any]]:
        """Execute and return all rows as mappings."""
        return self.execute()._rows().fetch_all()

    def get_all(self) -> list[dict[str, Any]]:
        return self.get()

    def get_one(self) -> Any:
        """Execute and return the first column of the first row."""
        return self.execute()._rows().fetch_one()

    def get_row(self) -> list[Any] | None:
        """Execute and return the first row as a positional list."""
        return self.execute()._rows().fetch_row()

    def get_hash(self) -> dict[str, Any] | None:
        """Execute and return the first row as a mapping."""
        return self.execute()._rows().fetch()

    def fetch(self) -> dict[str, Any] | None:
        """Return the next row, executing first if needed; ``None`` at the end."""
        return self._rows().fetch()

    def fetch_all(self) -> list[dict[str, Any]]:
        """Return the remaining rows, executing first if needed."""
        return self._rows().fetch_all()

    def found_rows(self) -> Any:
        """Return the number of rows the query matches, ignoring LIMIT.

        With ``SQL_CALC_FOUND_ROWS`` set on a driver that supports it (MySQL)
        the server-side counter is read; otherwise a ``count(*)`` copy of this
        query is executed.
        """
        if self.has_option("SQL_CALC_FOUND_ROWS") and self.owner.supports_found_rows:
            return self.owner.get_one("select found_rows()")
        counter = self.clone()
        counter.clear("limit").clear("fields").clear("order")
        options = [o for o in counter.args.get("options") if o != "SQL_CALC_FOUND_ROWS"]
        counter.args.replace("options", options)
        counter.field(counter.expr("count(*)"), "found_rows")
        return counter.select().get_one()

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def rewind(self) -> DSQL:
        """Close and discard the cursor; the next fetch executes again."""
        if self.cursor is not None:
            self.cursor.close()
            self.cursor = None
        return self

    def __iter__(self) -> Iterator[dict[str, Any]]:
        while True:
            row = self.fetch()
            if row is None:
                return
            yield row

    def __enter__(self) -> DSQL:
        return self

    def __exit__(self, *exc: object) -> None:
        self.rewind()


def _builders_in(value: Any) -> Iterator[DSQL]:
    if isinstance(value, DSQL):
        yield value
        yield from value._nested()
    elif dataclasses.is_dataclass(value):
        for field in dataclasses.fields(value):
            yield from _builders_in(getattr(value, field.name))
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _builders_in(item)
