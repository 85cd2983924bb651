"""Schema and table DDL generation.

Plain ``ALTER TABLE`` / ``CREATE TABLE`` statements are rendered through the
template core.  Schema creation and table drops must be safe to repeat, so
they are built as :class:`~sqlcompose.compile.plsql.ProceduralBlock` objects
that check the catalog before running the DDL dynamically.
"""
from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

import structlog

from sqlcompose.compile.context import GenerationContext
from sqlcompose.compile.plsql import (
    ConditionalBlock,
    DbmsSqlExecute,
    ExecuteImmediate,
    ExistenceCheck,
    ProceduralBlock,
)
from sqlcompose.compile.template import render
from sqlcompose.compile.type_mapper import ColumnSpec, TypeMapper
from sqlcompose.schema.table import TableLike, TableReference

logger = structlog.get_logger(__name__)

_NON_WORD = re.compile(r"\W+")


class DDLGenerator:
    """Builds schema, table and column DDL.

    Args:
        ctx: Shared generation context.
        type_mapper: Column fragment builder; defaults to one over ``ctx``.
    """

    def __init__(self, ctx: GenerationContext, type_mapper: TypeMapper | None = None) -> None:
        self._ctx = ctx
        self._mapper = type_mapper or TypeMapper(ctx)

    # ------------------------------------------------------------------
    # Schemas
    # ------------------------------------------------------------------

    def create_schema(self, name: str) -> ProceduralBlock:
        """Create a schema principal and grant it the configured privileges.

        Nothing runs when a user called ``name`` already exists, so the block
        can be executed any number of times.

        Args:
            name: Schema (user) name.

        Returns:
            The procedural block; ``str()`` renders it.
        """
        compiler = self._ctx.compiler
        config = self._ctx.config
        principal = compiler.quote_identifier(name)
        statements = [
            render(
                "CREATE USER $principal IDENTIFIED BY $password",
                principal=principal,
                password=compiler.quote_identifier(config.schema_password),
            )
        ]
        statements.extend(
            render("GRANT $privilege TO $principal", privilege=privilege, principal=principal)
            for privilege in config.schema_privileges
        )
        logger.debug("ddl.create_schema", schema=name, grants=len(config.schema_privileges))
        return ProceduralBlock(
            body=(
                ConditionalBlock(
                    check=ExistenceCheck("ALL_USERS", (("USERNAME", name),)),
                    expected_count=0,
                    steps=tuple(ExecuteImmediate(statement) for statement in statements),
                ),
            ),
            compiler=compiler,
        )

    def create_schema_query(self, name: str) -> str:
        return str(self.create_schema(name))

    def drop_schema(self, name: str) -> ProceduralBlock:
        """Drop a schema principal and everything it owns, if it exists."""
        compiler = self._ctx.compiler
        statement = render("DROP USER $principal CASCADE", principal=compiler.quote_identifier(name))
        return ProceduralBlock(
            body=(
                ConditionalBlock(
                    check=ExistenceCheck("ALL_USERS", (("USERNAME", name),)),
                    expected_count=1,
                    steps=(ExecuteImmediate(statement),),
                ),
            ),
            compiler=compiler,
        )

    def drop_schema_query(self, name: str) -> str:
        return str(self.drop_schema(name))

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def create_table_query(self, table: TableLike, attributes: Mapping[str, ColumnSpec]) -> str:
        """Render ``CREATE TABLE`` with one definition per attribute.

        Args:
            table: Table to create.
            attributes: Attribute name → definition (or raw DDL text).

        Returns:
            ``CREATE TABLE "t" ("a" NUMBER PRIMARY KEY, ...)``.

        Raises:
            EmptyEnumerationError: If an enum attribute has no values.
        """
        compiler = self._ctx.compiler
        definitions = self._mapper.attributes_to_sql(attributes)
        columns = ", ".join(
            f"{compiler.quote_identifier(column)} {definition}"
            for column, definition in definitions.items()
        )
        logger.debug("ddl.create_table", table=str(table), columns=len(definitions))
        return render(
            "CREATE TABLE $table ($columns)",
            table=compiler.quote_table(table),
            columns=columns,
        )

    def drop_table(self, table: TableLike) -> ProceduralBlock:
        """Drop ``table`` only if the catalog lists it.

        Unqualified tables are looked up in ``USER_TABLES``; schema-qualified
        ones in ``ALL_TABLES`` filtered by owner.
        """
        compiler = self._ctx.compiler
        ref = TableReference.coerce(table)
        if ref.schema_name:
            check = ExistenceCheck(
                "ALL_TABLES", (("OWNER", ref.schema_name), ("TABLE_NAME", ref.name))
            )
        else:
            check = ExistenceCheck("USER_TABLES", (("TABLE_NAME", ref.name),))
        statement = render("DROP TABLE $table", table=compiler.quote_table(ref))
        return ProceduralBlock(
            body=(ConditionalBlock(check=check, expected_count=1, steps=(DbmsSqlExecute(statement),)),),
            compiler=compiler,
        )

    def drop_table_query(self, table: TableLike) -> str:
        return str(self.drop_table(table))

    # ------------------------------------------------------------------
    # Columns and indexes
    # ------------------------------------------------------------------

    def add_column_query(self, table: TableLike, key: str, attribute: ColumnSpec) -> str:
        """Render ``ALTER TABLE … ADD "key" <definition>;``."""
        compiler = self._ctx.compiler
        definitions = self._mapper.attributes_to_sql({key: attribute})
        # ``field`` may rename the column, so take whatever key came back.
        column, definition = next(iter(definitions.items()))
        return render(
            "ALTER TABLE $table ADD $column $definition;",
            table=compiler.quote_table(table),
            column=compiler.quote_identifier(column),
            definition=definition,
        )

    def remove_column_query(self, table: TableLike, column: str) -> str:
        compiler = self._ctx.compiler
        return render(
            "ALTER TABLE $table DROP COLUMN $column;",
            table=compiler.quote_table(table),
            column=compiler.quote_identifier(column),
        )

    def rename_column_query(self, table: TableLike, before: str, after: str) -> str:
        compiler = self._ctx.compiler
        return render(
            "ALTER TABLE $table RENAME COLUMN $before TO $after;",
            table=compiler.quote_table(table),
            before=compiler.quote_identifier(before),
            after=compiler.quote_identifier(after),
        )

    def remove_index_query(self, table: TableLike, index: str | Sequence[str]) -> str:
        """Render ``DROP INDEX`` for a named index or one derived from columns.

        Args:
            table: Table owning the index.
            index: Index name, or the indexed column names.  Column lists
                produce the conventional ``<table>_<col>_<col>`` name.
        """
        if isinstance(index, str):
            index_name = index
        else:
            ref = TableReference.coerce(table)
            index_name = _underscore("_".join([ref.name, *index]))
        return render("DROP INDEX $index", index=self._ctx.compiler.quote_identifier(index_name))


def _underscore(name: str) -> str:
    """Snake-case ``name``: ``"userProfiles_emailAddress"`` → ``"user_profiles_email_address"``."""
    spaced = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return _NON_WORD.sub("_", spaced).lower()
