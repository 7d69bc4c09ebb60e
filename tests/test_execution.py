"""Execution, fetching and error reporting against the recording driver."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from dsql.config import DSQLConfig
from dsql.errors import DriverError, StatementError
from dsql.query import StatementType
from tests.fixtures import RecordingDriver


# ---------------------------------------------------------------------------
# Fetch modes
# ---------------------------------------------------------------------------


class TestFetch:
    def test_get_returns_mappings(self, driver):
        driver.returns(["id", "name"], [(1, "bob"), (2, "ann")])
        rows = driver.dsql().table("user").get()
        assert rows == [{"id": 1, "name": "bob"}, {"id": 2, "name": "ann"}]
        assert driver.last_query == ("select * from `user`", {})

    def test_get_sends_bind_params(self, driver):
        driver.returns(["id"], [(1,)])
        driver.dsql().table("user").where("id", 1).get()
        assert driver.last_query == ("select * from `user` where `id` = :a", {"a": 1})

    def test_get_all_is_get(self, driver):
        driver.returns(["id"], [(1,), (2,)])
        assert driver.dsql().table("t").get_all() == [{"id": 1}, {"id": 2}]

    def test_get_one(self, driver):
        driver.returns(["cnt"], [(7,)])
        q = driver.dsql().table("t")
        assert q.field(q.expr("count(*)"), "cnt").get_one() == 7

    def test_get_one_on_empty_result(self, driver):
        driver.returns(["cnt"], [])
        assert driver.dsql().table("t").get_one() is None

    def test_get_row_is_positional(self, driver):
        driver.returns(["id", "name"], [(1, "bob")])
        assert driver.dsql().table("t").get_row() == [1, "bob"]

    def test_get_hash(self, driver):
        driver.returns(["id", "name"], [(1, "bob")])
        assert driver.dsql().table("t").get_hash() == {"id": 1, "name": "bob"}

    def test_get_hash_on_empty_result(self, driver):
        driver.returns(["id"], [])
        assert driver.dsql().table("t").get_hash() is None

    def test_fetch_executes_once(self, driver):
        driver.returns(["id"], [(1,), (2,)])
        q = driver.dsql().table("t")
        assert q.fetch() == {"id": 1}
        assert q.fetch() == {"id": 2}
        assert q.fetch() is None
        assert len(driver.queries) == 1

    def test_every_get_executes_again(self, driver):
        driver.returns(["id"], [(1,)])
        q = driver.dsql().table("t")
        q.get()
        q.get()
        assert len(driver.queries) == 2


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


class TestStatements:
    def test_do_insert_returns_insert_id(self, driver):
        new_id = driver.dsql().table("user").set("name", "bob").do_insert()
        assert new_id == 42
        assert driver.last_query == (
            "insert into `user` (`name`) values (:a)",
            {"a": "bob"},
        )

    def test_do_update(self, driver):
        driver.dsql().table("user").set("age", 31).where("id", 1).do_update()
        assert driver.last_query[0] == "update `user` set `age`=:a where `id` = :a_2"

    def test_do_delete(self, driver):
        driver.dsql().table("user").where("id", 1).do_delete()
        assert driver.last_query[0] == "delete from `user` where `id` = :a"

    def test_do_replace(self, driver):
        driver.dsql().table("user").set("id", 1).do_replace()
        assert driver.last_query[0] == "replace into `user` (`id`) values (:a)"

    def test_do_call(self, driver):
        driver.dsql().do_call("recalc", [5])
        assert driver.last_query == ("call `recalc`(:a)", {"a": 5})

    def test_do_select(self, driver):
        q = driver.dsql().table("t").do_select()
        assert q.type is StatementType.SELECT
        assert driver.last_query[0] == "select * from `t`"

    def test_run_template_uses_builder_clauses(self, driver):
        q = driver.dsql().table("user").where("id", 3)
        q.run_template("select count(*) from [table] [where]")
        assert driver.last_query == (
            "select count(*) from `user` where `id` = :a",
            {"a": 3},
        )
        assert q.template is None


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_failed_select(self, driver):
        driver.error = DriverError("no such table: nope")
        q = driver.dsql().table("nope").where("id", 1)
        with pytest.raises(StatementError) as exc_info:
            q.get()
        err = exc_info.value
        assert err.args[0] == "SELECT or expression failed"
        assert err.sql == "select * from `nope` where `id` = :a"
        assert err.params == {"a": 1}
        assert err.template is None
        assert err.__cause__ is driver.error
        assert str(err) == "SELECT or expression failed: no such table: nope"

    def test_failed_insert_names_statement(self, driver):
        driver.error = DriverError("duplicate key")
        with pytest.raises(StatementError, match="INSERT statement failed") as exc_info:
            driver.dsql().table("user").set("id", 1).do_insert()
        assert exc_info.value.kind == "insert"

    def test_failed_template_execution_carries_template(self, driver):
        driver.error = DriverError("syntax error")
        template = "select [field] from [table] lock"
        with pytest.raises(StatementError) as exc_info:
            driver.dsql().table("t").run_template(template)
        err = exc_info.value
        assert err.args[0] == "Custom template execution failed"
        assert err.template == template

    def test_to_dict(self, driver):
        driver.error = DriverError("boom")
        with pytest.raises(StatementError) as exc_info:
            driver.dsql().table("t").where("a", 1).do_delete()
        assert exc_info.value.to_dict() == {
            "error": "DELETE statement failed",
            "kind": "delete",
            "sql": "delete from `t` where `a` = :a",
            "params": {"a": 1},
            "template": None,
            "cause": "boom",
        }

    def test_failure_is_logged(self, driver):
        driver.error = DriverError("boom")
        with capture_logs() as logs, pytest.raises(StatementError):
            driver.dsql().table("t").get()
        failed = [e for e in logs if e["event"] == "statement_failed"]
        assert failed
        assert failed[0]["log_level"] == "error"
        assert failed[0]["sql"] == "select * from `t`"


# ---------------------------------------------------------------------------
# Iteration and cursors
# ---------------------------------------------------------------------------


class TestIteration:
    def test_iterates_mappings(self, driver):
        driver.returns(["id"], [(1,), (2,)])
        assert list(driver.dsql().table("t")) == [{"id": 1}, {"id": 2}]

    def test_exhausted_until_rewind(self, driver):
        driver.returns(["id"], [(1,)])
        q = driver.dsql().table("t")
        assert list(q) == [{"id": 1}]
        assert list(q) == []
        q.rewind()
        assert list(q) == [{"id": 1}]
        assert len(driver.queries) == 2

    def test_rewind_closes_cursor(self, driver):
        driver.returns(["id"], [(1,)])
        q = driver.dsql().table("t")
        q.fetch()
        q.rewind()
        assert driver.cursors[0].closed
        assert q.cursor is None

    def test_execute_closes_previous_cursor(self, driver):
        driver.returns(["id"], [(1,)])
        q = driver.dsql().table("t")
        q.execute()
        q.execute()
        assert driver.cursors[0].closed
        assert not driver.cursors[1].closed

    def test_closed_rows_yield_nothing(self, driver):
        driver.returns(["id"], [(1,)])
        q = driver.dsql().table("t").execute()
        q.cursor.close()
        assert q.fetch() is None

    def test_context_manager_closes_cursor(self, driver):
        driver.returns(["id"], [(1,), (2,)])
        with driver.dsql().table("t") as q:
            assert q.fetch() == {"id": 1}
        assert driver.cursors[0].closed
        assert q.cursor is None


# ---------------------------------------------------------------------------
# found_rows()
# ---------------------------------------------------------------------------


class TestFoundRows:
    def test_count_fallback_drops_limit_order_and_fields(self, driver):
        driver.returns(["found_rows"], [(12,)])
        q = (
            driver.dsql()
            .table("user")
            .field("name")
            .where("age", ">", 18)
            .order("name")
            .limit(5)
        )
        assert q.found_rows() == 12
        assert driver.last_query == (
            "select count(*) `found_rows` from `user` where `age` > :a",
            {"a": 18},
        )

    def test_count_fallback_leaves_query_untouched(self, driver):
        driver.returns(["found_rows"], [(1,)])
        q = driver.dsql().table("user").field("name").limit(5)
        q.found_rows()
        assert q.render() == "select `name` from `user` limit :a"

    def test_calc_found_rows_reads_server_counter(self, driver):
        driver.returns(["n"], [(99,)])
        q = driver.dsql().table("user").calc_found_rows().limit(10)
        assert q.found_rows() == 99
        assert driver.last_query == ("select found_rows()", {})

    def test_server_counter_needs_driver_support(self):
        driver = RecordingDriver(DSQLConfig(dialect="postgres", paramstyle="named"))
        driver.returns(["found_rows"], [(7,)])
        q = driver.dsql().table("user").option("SQL_CALC_FOUND_ROWS").limit(10)
        assert q.found_rows() == 7
        assert driver.last_query == ('select count(*) "found_rows" from "user"', {})

    def test_calc_found_rows_is_ignored_without_support(self):
        driver = RecordingDriver(DSQLConfig(dialect="postgres", paramstyle="named"))
        q = driver.dsql().table("user").calc_found_rows()
        assert not q.has_option("SQL_CALC_FOUND_ROWS")
        assert q.render() == 'select * from "user"'


# ---------------------------------------------------------------------------
# Debug logging and clones
# ---------------------------------------------------------------------------


def test_debug_logs_rendered_statement(driver):
    q = driver.dsql().table("t").where("a", 1).debug()
    with capture_logs() as logs:
        q.render()
    assert logs == [
        {
            "event": "dsql_render",
            "log_level": "debug",
            "sql": "select * from `t` where `a` = :a",
            "params": {"a": 1},
        }
    ]


def test_debug_off_by_default(driver):
    with capture_logs() as logs:
        driver.dsql().table("t").render()
    assert [e for e in logs if e["event"] == "dsql_render"] == []


def test_debug_from_config():
    driver = RecordingDriver(DSQLConfig(dialect="mysql", paramstyle="named", debug=True))
    with capture_logs() as logs:
        driver.dsql().table("t").render()
    assert [e["event"] for e in logs] == ["dsql_render"]


def test_param_base_from_config():
    driver = RecordingDriver(DSQLConfig(dialect="mysql", paramstyle="named", param_base="p"))
    q = driver.dsql().table("t").where("a", 1)
    assert q.render() == "select * from `t` where `a` = :p"


def test_clone_is_independent(driver):
    driver.returns(["id"], [(1,)])
    q = driver.dsql().table("t").where("a", 1)
    q.execute()
    dup = q.clone()
    dup.where("b", 2)
    assert dup.cursor is None
    assert dup.owner is driver
    assert q.render() == "select * from `t` where `a` = :a"
    assert dup.render() == "select * from `t` where `a` = :a and `b` = :a_2"


def test_clone_copies_nested_builders(driver):
    q = driver.dsql().table("t")
    inner = q.or_expr().where("a", 1)
    q.where(inner)
    dup = q.clone()
    inner.where("b", 2)
    assert dup.render() == "select * from `t` where (`a` = :a)"
