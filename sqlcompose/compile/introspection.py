"""Fixed-shape catalog queries.

Table names appear in these queries as string *values* compared against
catalog columns, so they are escaped as literals rather than quoted as
identifiers.  Schema-qualified tables are looked up in the ``ALL_*`` views
with an ``OWNER`` filter; unqualified ones in the ``USER_*`` views.
"""
from __future__ import annotations

from sqlcompose.compile.context import GenerationContext
from sqlcompose.compile.template import render
from sqlcompose.schema.table import TableLike, TableReference


class IntrospectionQueries:
    """Builds catalog queries for schemas, tables, columns, indexes and keys.

    Args:
        ctx: Shared generation context.
    """

    def __init__(self, ctx: GenerationContext) -> None:
        self._ctx = ctx

    def show_schemas_query(self) -> str:
        return "SELECT USERNAME FROM ALL_USERS;"

    def version_query(self) -> str:
        return "SELECT VERSION FROM PRODUCT_COMPONENT_VERSION GROUP BY VERSION"

    def show_tables_query(self) -> str:
        return "SELECT TABLE_NAME FROM USER_TABLES"

    def show_indexes_query(self, table: TableLike) -> str:
        view, owner = self._catalog("INDEXES", table)
        return render(
            "SELECT INDEX_NAME FROM $view WHERE TABLE_NAME = $table$owner",
            view=view,
            table=self._table_literal(table),
            owner=owner,
        )

    def describe_table_query(self, table: TableLike) -> str:
        """List a table's columns with type, nullability and default, in order."""
        view, owner = self._catalog("TAB_COLUMNS", table)
        return render(
            "SELECT COLUMN_NAME, DATA_TYPE, DATA_LENGTH, NULLABLE, DATA_DEFAULT "
            "FROM $view WHERE TABLE_NAME = $table$owner ORDER BY COLUMN_ID",
            view=view,
            table=self._table_literal(table),
            owner=owner,
        )

    def get_foreign_keys_query(self, table: TableLike) -> str:
        """List a table's foreign keys with the referenced table and column.

        The referenced side is always read from the ``ALL_*`` views, since a
        key may point into another schema.
        """
        ref = TableReference.coerce(table)
        prefix = "ALL" if ref.schema_name else "USER"
        owner = ""
        if ref.schema_name:
            owner = f" AND C.OWNER = {self._ctx.compiler.escape(ref.schema_name)}"
        return render(
            "SELECT C.CONSTRAINT_NAME, CC.COLUMN_NAME, "
            "R.OWNER AS REFERENCED_TABLE_SCHEMA, R.TABLE_NAME AS REFERENCED_TABLE_NAME, "
            "RC.COLUMN_NAME AS REFERENCED_COLUMN_NAME, "
            "C.DELETE_RULE "
            "FROM ${prefix}_CONSTRAINTS C "
            "JOIN ${prefix}_CONS_COLUMNS CC ON CC.CONSTRAINT_NAME = C.CONSTRAINT_NAME "
            "AND CC.OWNER = C.OWNER "
            "JOIN ALL_CONSTRAINTS R ON R.CONSTRAINT_NAME = C.R_CONSTRAINT_NAME "
            "AND R.OWNER = C.R_OWNER "
            "JOIN ALL_CONS_COLUMNS RC ON RC.CONSTRAINT_NAME = R.CONSTRAINT_NAME "
            "AND RC.OWNER = R.OWNER AND RC.POSITION = CC.POSITION "
            "WHERE C.CONSTRAINT_TYPE = 'R' AND C.TABLE_NAME = $table$owner",
            prefix=prefix,
            table=self._table_literal(ref),
            owner=owner,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _catalog(self, suffix: str, table: TableLike) -> tuple[str, str]:
        """Return the catalog view for ``table`` and its owner predicate."""
        ref = TableReference.coerce(table)
        if ref.schema_name:
            owner = f" AND OWNER = {self._ctx.compiler.escape(ref.schema_name)}"
            return f"ALL_{suffix}", owner
        return f"USER_{suffix}", ""

    def _table_literal(self, table: TableLike) -> str:
        return self._ctx.compiler.escape(TableReference.coerce(table).name)
