"""Unit tests for IdentifierQuoter and the template engine."""

from __future__ import annotations

from dsql.compile.mysql import MySQLDialect
from dsql.compile.template import render_template, tokens
from dsql.quoting import IdentifierQuoter

QUOTE = IdentifierQuoter(MySQLDialect().quote_identifier)


class TestIdentifierQuoter:
    def test_bare_identifier(self):
        assert QUOTE("user") == "`user`"

    def test_dotted_identifier_quotes_each_part(self):
        assert QUOTE("u.name") == "`u`.`name`"

    def test_star_stays_bare(self):
        assert QUOTE("*") == "*"
        assert QUOTE("u.*") == "`u`.*"

    def test_unusual_characters_are_quoted(self):
        assert QUOTE("order-items") == "`order-items`"
        assert QUOTE("first name") == "`first name`"
        assert QUOTE("s.order-items") == "`s`.`order-items`"

    def test_backticks_inside_name_are_escaped(self):
        assert MySQLDialect().quote_identifier("we`ird") == "`we``ird`"


class TestTemplate:
    def test_tokens_are_listed_in_order(self):
        assert tokens("select [field] [from] [table]") == ["field", "from", "table"]

    def test_known_tokens_are_substituted(self):
        out = render_template("a [x] b", {"x": "X"}.get)
        assert out == "a X b"

    def test_unknown_tokens_are_kept(self):
        out = render_template("select [nope]", lambda name: None)
        assert out == "select [nope]"

    def test_empty_token_drops_preceding_space(self):
        out = render_template("insert [opt] into [t]", {"opt": "", "t": "x"}.get)
        assert out == "insert into x"

    def test_template_without_tokens_is_unchanged(self):
        assert render_template("now()", lambda name: "X") == "now()"
