"""Unit tests for the template substitution core."""

from __future__ import annotations

import pytest

from sqlcompose.compile.template import render
from sqlcompose.errors import UnresolvedPlaceholderError


def test_placeholders_are_filled():
    sql = render("ALTER TABLE $table DROP COLUMN $column;", table='"users"', column='"age"')
    assert sql == 'ALTER TABLE "users" DROP COLUMN "age";'


def test_braced_placeholder():
    assert render("FROM ${prefix}_TABLES", prefix="USER") == "FROM USER_TABLES"


def test_substituted_values_are_not_rescanned():
    sql = render("SET $a WHERE $b", a="$b", b="x = 1")
    assert sql == "SET $b WHERE x = 1"


def test_same_placeholder_twice():
    assert render("$x + $x", x="1") == "1 + 1"


def test_unused_fragments_are_ignored():
    assert render("SELECT 1", table='"t"') == "SELECT 1"


def test_dollar_escape():
    assert render("SELECT '$$' FROM $t", t="DUAL") == "SELECT '$' FROM DUAL"


def test_missing_placeholder_raises():
    with pytest.raises(UnresolvedPlaceholderError) as exc_info:
        render("UPDATE $table SET $values", table='"t"')
    assert exc_info.value.placeholder == "values"
    assert exc_info.value.code == "UNRESOLVED_PLACEHOLDER"
    assert exc_info.value.details["template"] == "UPDATE $table SET $values"


def test_malformed_placeholder_raises():
    with pytest.raises(UnresolvedPlaceholderError):
        render("SELECT $ FROM DUAL")
