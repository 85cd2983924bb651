"""Unit tests for DialectRegistry and get_generator."""

from __future__ import annotations

import pytest

import sqlcompose
from sqlcompose.compile.oracle import OracleCompiler
from sqlcompose.compile.registry import DialectEntry, DialectRegistry
from sqlcompose.config import GeneratorConfig
from sqlcompose.errors import CompilationError


class LegacyOracleCompiler(OracleCompiler):
    """Oracle variant that renders booleans as 'Y' / 'N'."""

    @property
    def dialect_name(self) -> str:
        return "oracle_legacy"

    def boolean_literal(self, value: bool) -> str:
        return "'Y'" if value else "'N'"


@pytest.fixture()
def isolated_registry(monkeypatch):
    """Give each test its own copy of the registered dialects."""
    monkeypatch.setattr(DialectRegistry, "_entries", dict(DialectRegistry._entries))
    return DialectRegistry


def test_oracle_is_registered():
    assert "oracle" in DialectRegistry.names()
    assert DialectRegistry.entry("oracle") == DialectEntry(OracleCompiler, GeneratorConfig())


def test_compiler_returns_fresh_instances():
    first = DialectRegistry.compiler("oracle")
    assert isinstance(first, OracleCompiler)
    assert first is not DialectRegistry.compiler("oracle")


def test_names_are_case_insensitive():
    assert DialectRegistry.generator("ORACLE").dialect == "oracle"


def test_unknown_dialect_raises():
    with pytest.raises(CompilationError) as exc_info:
        DialectRegistry.generator("db2")
    assert exc_info.value.target == "db2"
    assert "oracle" in str(exc_info.value)


def test_register_decorator_with_dialect_defaults(isolated_registry):
    isolated_registry.register("oracle_legacy", GeneratorConfig(schema_password="legacy"))(
        LegacyOracleCompiler
    )

    generator = sqlcompose.get_generator("oracle_legacy")

    assert generator.dialect == "oracle_legacy"
    assert 'IDENTIFIED BY "legacy"' in generator.create_schema_query("app")
    assert generator.create_table_query(
        "t", {"on": sqlcompose.AttributeDefinition(sql_type="CHAR(1)", default_value=True)}
    ) == "CREATE TABLE \"t\" (\"on\" CHAR(1) DEFAULT 'Y')"


def test_caller_config_replaces_dialect_defaults(isolated_registry):
    isolated_registry.add("oracle_legacy", LegacyOracleCompiler, GeneratorConfig(schema_password="legacy"))

    generator = DialectRegistry.generator("oracle_legacy", GeneratorConfig(schema_password="mine"))

    assert 'IDENTIFIED BY "mine"' in generator.create_schema_query("app")


def test_add_replaces_earlier_entry(isolated_registry):
    isolated_registry.add("oracle", LegacyOracleCompiler)
    assert isinstance(DialectRegistry.compiler("oracle"), LegacyOracleCompiler)


def test_get_generator_defaults():
    generator = sqlcompose.get_generator()
    assert generator.dialect == "oracle"
    assert generator.quote_identifier("users") == '"users"'


def test_get_generator_with_config():
    generator = sqlcompose.get_generator(config=GeneratorConfig(schema_password="pw"))
    assert 'IDENTIFIED BY "pw"' in generator.create_schema_query("app")


def test_get_generator_unknown_target():
    with pytest.raises(CompilationError):
        sqlcompose.get_generator("nosuchdb")
