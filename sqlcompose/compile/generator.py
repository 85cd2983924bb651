"""Top-level statement generator.

``QueryGenerator`` is the orchestrator the mapping layer talks to.  It wires
together the focused generators and exposes their operations under one
object.  All dialect-specific behaviour is delegated to the injected
``DialectCompiler``.

Sub-generator hierarchy
-----------------------
QueryGenerator
  ├── TypeMapper            (type_mapper.py)
  ├── DDLGenerator          (ddl.py)
  ├── DMLGenerator          (dml.py)
  ├── TransactionGenerator  (transaction.py)
  └── IntrospectionQueries  (introspection.py)

A ``QueryGenerator`` holds only its frozen :class:`GenerationContext`; every
call builds its own local state, so one instance can be shared across
threads.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlcompose.compile.base import DialectCompiler
from sqlcompose.compile.context import GenerationContext
from sqlcompose.compile.ddl import DDLGenerator
from sqlcompose.compile.dml import DMLGenerator, ModelAttributes, OptionsLike
from sqlcompose.compile.introspection import IntrospectionQueries
from sqlcompose.compile.plsql import ProceduralBlock
from sqlcompose.compile.transaction import TransactionGenerator
from sqlcompose.compile.type_mapper import (
    ColumnFragment,
    ColumnSpec,
    TypeMapper,
    find_auto_increment_fields,
)
from sqlcompose.config import GeneratorConfig
from sqlcompose.schema.options import IsolationLevel, Transaction, WhereClause
from sqlcompose.schema.table import TableLike


class QueryGenerator:
    """Generates dialect-specific SQL from structural descriptions.

    Args:
        compiler: Dialect-specific quoting and escaping strategy.
        config: Generator-wide defaults; ``GeneratorConfig()`` when omitted.
    """

    def __init__(self, compiler: DialectCompiler, config: GeneratorConfig | None = None) -> None:
        self._ctx = GenerationContext(compiler=compiler, config=config or GeneratorConfig())
        self.type_mapper = TypeMapper(self._ctx)
        self.ddl = DDLGenerator(self._ctx, self.type_mapper)
        self.dml = DMLGenerator(self._ctx)
        self.transactions = TransactionGenerator(self._ctx)
        self.introspection = IntrospectionQueries(self._ctx)

    @property
    def dialect(self) -> str:
        return self._ctx.compiler.dialect_name

    @property
    def compiler(self) -> DialectCompiler:
        return self._ctx.compiler

    # ------------------------------------------------------------------
    # Quoting and escaping
    # ------------------------------------------------------------------

    def quote_identifier(self, name: str) -> str:
        return self._ctx.compiler.quote_identifier(name)

    def quote_table(self, table: TableLike) -> str:
        return self._ctx.compiler.quote_table(table)

    def escape(self, value: Any, attribute: Any = None) -> str:
        return self._ctx.compiler.escape(value, attribute)

    # ------------------------------------------------------------------
    # Column definitions
    # ------------------------------------------------------------------

    def to_column_fragments(self, attributes: Mapping[str, ColumnSpec]) -> dict[str, ColumnFragment]:
        return self.type_mapper.to_column_fragments(attributes)

    def attributes_to_sql(self, attributes: Mapping[str, ColumnSpec]) -> dict[str, str]:
        return self.type_mapper.attributes_to_sql(attributes)

    def find_auto_increment_fields(self, attributes: Mapping[str, ColumnSpec]) -> list[str]:
        return find_auto_increment_fields(attributes)

    # ------------------------------------------------------------------
    # DDL
    # ------------------------------------------------------------------

    def create_schema(self, name: str) -> ProceduralBlock:
        return self.ddl.create_schema(name)

    def create_schema_query(self, name: str) -> str:
        return self.ddl.create_schema_query(name)

    def drop_schema_query(self, name: str) -> str:
        return self.ddl.drop_schema_query(name)

    def create_table_query(self, table: TableLike, attributes: Mapping[str, ColumnSpec]) -> str:
        return self.ddl.create_table_query(table, attributes)

    def drop_table_query(self, table: TableLike) -> str:
        return self.ddl.drop_table_query(table)

    def add_column_query(self, table: TableLike, key: str, attribute: ColumnSpec) -> str:
        return self.ddl.add_column_query(table, key, attribute)

    def remove_column_query(self, table: TableLike, column: str) -> str:
        return self.ddl.remove_column_query(table, column)

    def rename_column_query(self, table: TableLike, before: str, after: str) -> str:
        return self.ddl.rename_column_query(table, before, after)

    def remove_index_query(self, table: TableLike, index: str | Sequence[str]) -> str:
        return self.ddl.remove_index_query(table, index)

    # ------------------------------------------------------------------
    # DML
    # ------------------------------------------------------------------

    def insert_query(
        self,
        table: TableLike,
        values: Mapping[str, Any],
        model_attributes: ModelAttributes = None,
        options: OptionsLike = None,
    ) -> str:
        return self.dml.insert_query(table, values, model_attributes, options)

    def bulk_insert_query(
        self,
        table: TableLike,
        rows: Sequence[Mapping[str, Any]],
        model_attributes: ModelAttributes = None,
        options: OptionsLike = None,
    ) -> str:
        return self.dml.bulk_insert_query(table, rows, model_attributes, options)

    def update_query(
        self,
        table: TableLike,
        values: Mapping[str, Any],
        where: WhereClause = None,
        model_attributes: ModelAttributes = None,
        options: OptionsLike = None,
    ) -> str:
        return self.dml.update_query(table, values, where, model_attributes, options)

    def delete_query(self, table: TableLike, where: WhereClause = None, options: OptionsLike = None) -> str:
        return self.dml.delete_query(table, where, options)

    def upsert_query(
        self,
        table: TableLike,
        insert_values: Mapping[str, Any],
        update_values: Mapping[str, Any],
        where: WhereClause,
        model_attributes: ModelAttributes = None,
        options: OptionsLike = None,
    ) -> str:
        return self.dml.upsert_query(
            table, insert_values, update_values, where, model_attributes, options
        )

    def strict_upsert_query(
        self,
        table: TableLike,
        insert_values: Mapping[str, Any],
        update_values: Mapping[str, Any],
        where: WhereClause,
        model_attributes: ModelAttributes = None,
        options: OptionsLike = None,
    ) -> str:
        return self.dml.strict_upsert_query(
            table, insert_values, update_values, where, model_attributes, options
        )

    def limit_offset_fragment(self, limit: int | None = None, offset: int | None = None) -> str:
        return self.dml.limit_offset_fragment(limit, offset)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def start_transaction_query(self, transaction: Transaction, options: OptionsLike = None) -> str:
        return self.transactions.start_transaction_query(transaction, options)

    def commit_transaction_query(self, transaction: Transaction) -> str:
        return self.transactions.commit_transaction_query(transaction)

    def rollback_transaction_query(self, transaction: Transaction) -> str:
        return self.transactions.rollback_transaction_query(transaction)

    def set_autocommit_query(self, enabled: bool = True) -> str:
        return self.transactions.set_autocommit_query(enabled)

    def set_isolation_level_query(self, level: IsolationLevel | str) -> str:
        return self.transactions.set_isolation_level_query(level)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def show_schemas_query(self) -> str:
        return self.introspection.show_schemas_query()

    def version_query(self) -> str:
        return self.introspection.version_query()

    def show_tables_query(self) -> str:
        return self.introspection.show_tables_query()

    def show_indexes_query(self, table: TableLike) -> str:
        return self.introspection.show_indexes_query(table)

    def describe_table_query(self, table: TableLike) -> str:
        return self.introspection.describe_table_query(table)

    def get_foreign_keys_query(self, table: TableLike) -> str:
        return self.introspection.get_foreign_keys_query(table)
