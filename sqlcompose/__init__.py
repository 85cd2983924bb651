"""sqlcompose – dialect-aware SQL statement compiler.

Structural descriptions in, SQL text out.

Public API
----------
``get_generator``
    Return a :class:`QueryGenerator` for a registered dialect target.

``QueryGenerator``
    DDL, DML, transaction and catalog statement generation.

Re-exported types
-----------------
``AttributeDefinition``, ``ReferenceSpec``, ``TableReference``,
``QueryOptions``, ``Transaction``, ``IsolationLevel``, ``GeneratorConfig``,
``ProceduralBlock`` and all error classes.

Extensibility
-------------
New dialects are registered with their default configuration::

    from sqlcompose.compile.registry import DialectRegistry

    @DialectRegistry.register("mydialect", GeneratorConfig(schema_password="pw"))
    class MyDialectCompiler(DialectCompiler):
        ...

After registration, ``get_generator("mydialect")`` picks it up.
"""

from __future__ import annotations

from sqlcompose.compile.base import MISSING, DialectCompiler
from sqlcompose.compile.generator import QueryGenerator
from sqlcompose.compile.oracle import OracleCompiler
from sqlcompose.compile.plsql import ProceduralBlock
from sqlcompose.compile.registry import DialectEntry, DialectRegistry
from sqlcompose.compile.type_mapper import ColumnFragment, ColumnPart, PartKind
from sqlcompose.config import GeneratorConfig
from sqlcompose.errors import (
    CompilationError,
    EmptyEnumerationError,
    EscapeError,
    GenerationError,
    InvalidDefinitionError,
    SQLComposeError,
    UnknownIsolationLevelError,
    UnresolvedPlaceholderError,
)
from sqlcompose.schema.attributes import AttributeDefinition, ReferenceSpec, RuntimeDefault
from sqlcompose.schema.converters import attributes_from_sqlalchemy
from sqlcompose.schema.options import IsolationLevel, QueryOptions, SupportsSQL, Transaction
from sqlcompose.schema.table import TableReference

# ---------------------------------------------------------------------------
# Register built-in dialects
# ---------------------------------------------------------------------------

DialectRegistry.add("oracle", OracleCompiler)

__all__ = [
    # Entry point
    "get_generator",
    "QueryGenerator",
    # Schema types
    "AttributeDefinition",
    "ReferenceSpec",
    "RuntimeDefault",
    "TableReference",
    "QueryOptions",
    "Transaction",
    "IsolationLevel",
    "SupportsSQL",
    "MISSING",
    # Converters
    "attributes_from_sqlalchemy",
    # Configuration
    "GeneratorConfig",
    # Compilation
    "DialectRegistry",
    "DialectEntry",
    "DialectCompiler",
    "OracleCompiler",
    "ColumnFragment",
    "ColumnPart",
    "PartKind",
    "ProceduralBlock",
    # Errors
    "SQLComposeError",
    "GenerationError",
    "EmptyEnumerationError",
    "UnknownIsolationLevelError",
    "UnresolvedPlaceholderError",
    "InvalidDefinitionError",
    "EscapeError",
    "CompilationError",
]


def get_generator(target: str = "oracle", config: GeneratorConfig | None = None) -> QueryGenerator:
    """Return a :class:`QueryGenerator` for the dialect registered as ``target``.

    ``config`` replaces the dialect's registered defaults when given.

    Example::

        generator = sqlcompose.get_generator("oracle")
        sql = generator.create_table_query("users", {
            "id": AttributeDefinition(sql_type="NUMBER", primary_key=True),
        })

    Args:
        target: Registered dialect name.
        config: Optional generator-wide defaults.

    Returns:
        A ready-to-use :class:`QueryGenerator`.

    Raises:
        CompilationError: If no dialect is registered as ``target``.
    """
    return DialectRegistry.generator(target, config)
