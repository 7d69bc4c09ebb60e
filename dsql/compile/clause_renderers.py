"""Clause renderers.

Each function renders exactly one template token from the fragments a
builder has accumulated, and returns ``""`` when the clause is empty.
Nested builders are rendered through :meth:`DSQL.consume`, which lends
them the parent's parameter pool, so bind names stay unique across the
whole statement.

Tokens
------
``table``, ``table_noalias``, ``from``: the table list.
``field``: the select list (``*`` when empty).
``where``, ``orwhere``, ``having``: predicates.
``join``: ``<type> join ... on ...``.
``group``, ``order``, ``limit``: grouping, ordering and row limiting.
``options``, ``options_insert``, ``options_replace``: statement modifiers.
``set``, ``set_fields``, ``set_values``: assignments for UPDATE, INSERT and REPLACE.
``fx``, ``args``: CALL.
"""
from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from dsql.compile.registry import RendererRegistry
from dsql.errors import RenderError
from dsql.fragments import Condition, JoinFragment
from dsql.params import UNDEFINED

if TYPE_CHECKING:
    from dsql.query import DSQL

_DIRECTION = re.compile(r"^(.*?)\s+(asc|desc)$", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Tables and fields
# ---------------------------------------------------------------------------


@RendererRegistry.register("table")
def render_table(q: DSQL) -> str:
    parts = []
    for frag in q.args.get("table"):
        table_sql = q.quote(frag.name)
        if frag.alias:
            table_sql = f"{table_sql} {q.quote(frag.alias)}"
        parts.append(table_sql)
    return ",".join(parts)


@RendererRegistry.register("table_noalias")
def render_table_noalias(q: DSQL) -> str:
    return ", ".join(q.quote(frag.name) for frag in q.args.get("table"))


@RendererRegistry.register("from")
def render_from(q: DSQL) -> str:
    return "from" if q.args.has("table") else ""


@RendererRegistry.register("field")
def render_field(q: DSQL) -> str:
    fields = q.args.get("fields")
    if not fields:
        return "*"
    parts = []
    for frag in fields:
        field_sql = q.consume(frag.expr)
        if frag.table and not q.is_query(frag.expr):
            field_sql = f"{q.quote(frag.table)}.{field_sql}"
        if frag.alias:
            field_sql = f"{field_sql} {q.quote(frag.alias)}"
        parts.append(field_sql)
    return ",".join(parts)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def _render_condition(q: DSQL, cond: Condition, clause: str) -> str:
    lhs = cond.lhs
    lhs_sql = q.consume(lhs) if q.is_query(lhs) else q.quote(lhs)

    op, value = cond.op, cond.rhs
    if op is UNDEFINED and value is UNDEFINED:
        return lhs_sql

    if op is UNDEFINED:
        if isinstance(value, (list, tuple)) or (q.is_query(value) and value.is_select()):
            op = "in"
        else:
            op = "="
    else:
        op = " ".join(str(op).split()).lower()

    if op in ("in", "not in") and isinstance(value, str):
        value = [v.strip() for v in value.split(",")]

    if isinstance(value, (list, tuple)):
        if not value:
            raise RenderError(f"Empty value list for '{op}' condition.", clause=clause)
        if op not in ("in", "not in"):
            op = "in"
        names = q.escape(list(value))
        return f"{lhs_sql} {op} ({','.join(names)})"

    value_sql = q.consume(value) if q.is_query(value) else q.escape(value)
    return f"{lhs_sql} {op} {value_sql}"


def _render_conditions(q: DSQL, clause: str) -> list[str]:
    return [_render_condition(q, cond, clause) for cond in q.args.get(clause)]


@RendererRegistry.register("where")
def render_where(q: DSQL) -> str:
    if not q.args.has("where"):
        return ""
    return "where " + " and ".join(_render_conditions(q, "where"))


@RendererRegistry.register("orwhere")
def render_orwhere(q: DSQL) -> str:
    return " or ".join(_render_conditions(q, "where"))


@RendererRegistry.register("having")
def render_having(q: DSQL) -> str:
    if not q.args.has("having"):
        return ""
    return "having " + " and ".join(_render_conditions(q, "having"))


# ---------------------------------------------------------------------------
# Joins
# ---------------------------------------------------------------------------


def _render_join(q: DSQL, join: JoinFragment) -> str:
    sql = f"{join.join_type} join {q.quote(join.foreign_table)}"
    if join.foreign_alias:
        sql += f" as {q.quote(join.foreign_alias)}"
    sql += " on "
    if join.on is not None:
        return sql + q.consume(join.on)
    foreign = q.quote(join.foreign_alias or join.foreign_table)
    master = q.quote(join.master_table)
    return (
        f"{sql}{foreign}.{q.quote(join.foreign_field)}"
        f" = {master}.{q.quote(join.master_field)}"
    )


@RendererRegistry.register("join")
def render_join(q: DSQL) -> str:
    return " ".join(_render_join(q, join) for join in q.args.get("join"))


# ---------------------------------------------------------------------------
# Grouping, ordering, limiting
# ---------------------------------------------------------------------------


@RendererRegistry.register("group")
def render_group(q: DSQL) -> str:
    if not q.args.has("group"):
        return ""
    return "group by " + ", ".join(q.consume(g) for g in q.args.get("group"))


def _render_order_item(q: DSQL, item: Any) -> str:
    if q.is_query(item):
        return q.consume(item)
    match = _DIRECTION.match(str(item).strip())
    if match:
        return f"{q.quote(match.group(1))} {match.group(2).lower()}"
    return q.quote(str(item).strip())


@RendererRegistry.register("order")
def render_order(q: DSQL) -> str:
    if not q.args.has("order"):
        return ""
    return "order by " + ", ".join(_render_order_item(q, o) for o in q.args.get("order"))


@RendererRegistry.register("limit")
def render_limit(q: DSQL) -> str:
    limit = q.args.first("limit")
    if limit is None:
        return ""
    count_sql = q.escape(limit.count)
    offset_sql = q.escape(limit.offset) if limit.offset else None
    return q.owner.render_limit(count_sql, offset_sql)


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@RendererRegistry.register("options")
def render_options(q: DSQL) -> str:
    return " ".join(str(o) for o in q.args.get("options"))


@RendererRegistry.register("options_insert")
def render_options_insert(q: DSQL) -> str:
    return " ".join(str(o) for o in q.args.get("options_insert"))


@RendererRegistry.register("options_replace")
def render_options_replace(q: DSQL) -> str:
    return " ".join(str(o) for o in q.args.get("options_replace"))


# ---------------------------------------------------------------------------
# Assignments
# ---------------------------------------------------------------------------


def _set_lhs(q: DSQL, field: Any) -> str:
    return q.consume(field) if q.is_query(field) else q.quote(field)


def _set_rhs(q: DSQL, value: Any) -> str:
    return q.consume(value) if q.is_query(value) else q.escape(value)


@RendererRegistry.register("set")
def render_set(q: DSQL) -> str:
    return ", ".join(
        f"{_set_lhs(q, s.field)}={_set_rhs(q, s.value)}" for s in q.args.get("set")
    )


@RendererRegistry.register("set_fields")
def render_set_fields(q: DSQL) -> str:
    return ",".join(_set_lhs(q, s.field) for s in q.args.get("set"))


@RendererRegistry.register("set_values")
def render_set_values(q: DSQL) -> str:
    return ",".join(_set_rhs(q, s.value) for s in q.args.get("set"))


# ---------------------------------------------------------------------------
# CALL
# ---------------------------------------------------------------------------


@RendererRegistry.register("fx")
def render_fx(q: DSQL) -> str:
    fx = q.args.first("fx")
    if fx is None:
        raise RenderError("No procedure given for call().", clause="fx")
    return q.consume(fx)


@RendererRegistry.register("args")
def render_args(q: DSQL) -> str:
    return ", ".join(_set_rhs(q, arg) for arg in q.args.get("args"))
