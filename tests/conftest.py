"""Shared pytest fixtures for sqlcompose tests."""
from __future__ import annotations

import pytest

from sqlcompose.compile.context import GenerationContext
from sqlcompose.compile.generator import QueryGenerator
from sqlcompose.compile.oracle import OracleCompiler


@pytest.fixture(scope="session")
def compiler() -> OracleCompiler:
    return OracleCompiler()


@pytest.fixture(scope="session")
def ctx(compiler: OracleCompiler) -> GenerationContext:
    """Generation context with default configuration."""
    return GenerationContext(compiler=compiler)


@pytest.fixture(scope="session")
def generator(compiler: OracleCompiler) -> QueryGenerator:
    """Oracle generator with default configuration, shared across tests."""
    return QueryGenerator(compiler)
