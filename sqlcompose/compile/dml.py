"""INSERT / UPDATE / DELETE / upsert generation.

Column names go through the identifier quoter and every value through the
literal escaper.  WHERE text is produced elsewhere (already safe) and is
appended as-is.

Upserts
-------
Oracle has no ``INSERT … ON CONFLICT``.  :meth:`DMLGenerator.upsert_query`
emits an ``INSERT OR IGNORE`` followed by an ``UPDATE`` of the same row.
These are two statements: a concurrent writer can change the row between
them.  :meth:`DMLGenerator.strict_upsert_query` is the atomic alternative,
a single ``MERGE`` statement, and must be chosen explicitly.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence, Sized
from typing import Any

import structlog

from sqlcompose.compile.base import MISSING
from sqlcompose.compile.context import GenerationContext
from sqlcompose.compile.template import render
from sqlcompose.errors import GenerationError
from sqlcompose.schema.attributes import AttributeDefinition
from sqlcompose.schema.options import QueryOptions, SupportsSQL, WhereClause
from sqlcompose.schema.table import TableLike

logger = structlog.get_logger(__name__)

OptionsLike = QueryOptions | dict[str, Any] | None
ModelAttributes = Mapping[str, AttributeDefinition] | None


def remove_null_values(values: Mapping[str, Any], omit_null: bool) -> dict[str, Any]:
    """Return ``values`` without ``None`` entries when ``omit_null`` is set."""
    if not omit_null:
        return dict(values)
    return {key: value for key, value in values.items() if value is not None}


def where_text(where: WhereClause) -> str:
    """Return the compiled predicate text, or ``""`` when there is none."""
    if where is None:
        return ""
    if isinstance(where, SupportsSQL):
        where = where.to_sql()
    return where.strip()


class DMLGenerator:
    """Builds data-modification statements.

    Args:
        ctx: Shared generation context.
    """

    def __init__(self, ctx: GenerationContext) -> None:
        self._ctx = ctx

    # ------------------------------------------------------------------
    # INSERT
    # ------------------------------------------------------------------

    def insert_query(
        self,
        table: TableLike,
        values: Mapping[str, Any],
        model_attributes: ModelAttributes = None,
        options: OptionsLike = None,
    ) -> str:
        """Render a single-row ``INSERT``.

        Args:
            table: Target table.
            values: Column → value, in column order.
            model_attributes: Optional column definitions used as escaping
                hints.
            options: ``ignore`` adds ``OR IGNORE``; ``omit_null`` drops
                ``None`` values.

        Returns:
            ``INSERT INTO "t" ("a","b") VALUES (1,'x');``

        Raises:
            GenerationError: ``EMPTY_INSERT`` when no column is left to insert.
        """
        opts = self._ctx.options(options)
        compiler = self._ctx.compiler
        row = remove_null_values(values, opts.omit_null)
        _require_columns(row, table)
        return render(
            "INSERT$ignore INTO $table ($columns) VALUES ($values);",
            ignore=compiler.ignore_modifier if opts.ignore else "",
            table=compiler.quote_table(table),
            columns=",".join(compiler.quote_identifier(column) for column in row),
            values=",".join(
                self._escape(column, value, model_attributes) for column, value in row.items()
            ),
        )

    def bulk_insert_query(
        self,
        table: TableLike,
        rows: Sequence[Mapping[str, Any]],
        model_attributes: ModelAttributes = None,
        options: OptionsLike = None,
    ) -> str:
        """Render one multi-row ``INSERT``.

        The column list is the union of every row's keys in first-seen
        order.  A row lacking one of those columns gets the escaped
        :data:`~sqlcompose.compile.base.MISSING` value (``NULL``) in that
        slot.

        Args:
            table: Target table.
            rows: Row mappings, rendered in input order.
            model_attributes: Optional escaping hints.
            options: ``ignore_duplicates`` adds ``OR IGNORE``.

        Raises:
            GenerationError: ``EMPTY_INSERT`` when the rows name no column.
        """
        opts = self._ctx.options(options)
        compiler = self._ctx.compiler

        columns: list[str] = []
        seen: set[str] = set()
        for row in rows:
            for column in row:
                if column not in seen:
                    seen.add(column)
                    columns.append(column)
        _require_columns(columns, table)

        tuples = [
            "("
            + ",".join(self._escape(column, row.get(column, MISSING), model_attributes) for column in columns)
            + ")"
            for row in rows
        ]
        logger.debug("dml.bulk_insert", table=str(table), rows=len(tuples), columns=len(columns))
        return render(
            "INSERT$ignore INTO $table ($columns) VALUES $tuples;",
            ignore=compiler.ignore_modifier if opts.ignore_duplicates else "",
            table=compiler.quote_table(table),
            columns=",".join(compiler.quote_identifier(column) for column in columns),
            tuples=",".join(tuples),
        )

    # ------------------------------------------------------------------
    # UPDATE / DELETE
    # ------------------------------------------------------------------

    def update_query(
        self,
        table: TableLike,
        values: Mapping[str, Any],
        where: WhereClause = None,
        model_attributes: ModelAttributes = None,
        options: OptionsLike = None,
    ) -> str:
        """Render ``UPDATE "t" SET "a"=1,"b"=2 WHERE …``.

        An empty ``values`` mapping yields an empty ``SET`` list; callers are
        expected to catch that case themselves.
        """
        opts = self._ctx.options(options)
        compiler = self._ctx.compiler
        row = remove_null_values(values, opts.omit_null)
        if not row:
            logger.warning("dml.empty_update", table=str(table))
        predicate = where_text(where)
        return render(
            "UPDATE $table SET $values $where",
            table=compiler.quote_table(table),
            values=self._assignments(row, model_attributes),
            where=f"WHERE {predicate}" if predicate else "",
        ).strip()

    def delete_query(
        self,
        table: TableLike,
        where: WhereClause = None,
        options: OptionsLike = None,
    ) -> str:
        """Render ``DELETE FROM "t"`` with an optional ``WHERE``.

        The ``limit`` option caps the number of deleted rows via ``ROWNUM``.
        """
        opts = self._ctx.options(options)
        predicate = where_text(where)
        if opts.limit is not None:
            rownum = f"ROWNUM <= {_row_count(opts.limit, 'limit')}"
            predicate = f"({predicate}) AND {rownum}" if predicate else rownum
        return render(
            "DELETE FROM $table$where",
            table=self._ctx.compiler.quote_table(table),
            where=f" WHERE {predicate}" if predicate else "",
        )

    # ------------------------------------------------------------------
    # Upserts
    # ------------------------------------------------------------------

    def upsert_query(
        self,
        table: TableLike,
        insert_values: Mapping[str, Any],
        update_values: Mapping[str, Any],
        where: WhereClause,
        model_attributes: ModelAttributes = None,
        options: OptionsLike = None,
    ) -> str:
        """Render an ignore-duplicates insert followed by an update.

        Not atomic: the two statements run separately.  Use
        :meth:`strict_upsert_query` when that race matters.
        """
        opts = self._ctx.options(options).model_copy(update={"ignore": True})
        insert_sql = self.insert_query(table, insert_values, model_attributes, opts)
        update_sql = self.update_query(table, update_values, where, model_attributes, opts)
        return f"{insert_sql} {update_sql}"

    def strict_upsert_query(
        self,
        table: TableLike,
        insert_values: Mapping[str, Any],
        update_values: Mapping[str, Any],
        where: WhereClause,
        model_attributes: ModelAttributes = None,
        options: OptionsLike = None,
    ) -> str:
        """Render an atomic upsert as a single ``MERGE`` statement.

        Raises:
            GenerationError: If ``where`` is empty; ``MERGE`` needs a match
                condition.
            GenerationError: ``EMPTY_INSERT`` when no insert value remains.
        """
        opts = self._ctx.options(options)
        compiler = self._ctx.compiler
        predicate = where_text(where)
        if not predicate:
            raise GenerationError(
                "A strict upsert needs a WHERE predicate to match the existing row.",
                code="MISSING_PREDICATE",
                details={"table": str(table)},
            )
        insert_row = remove_null_values(insert_values, opts.omit_null)
        update_row = remove_null_values(update_values, opts.omit_null)
        _require_columns(insert_row, table)

        parts = ["MERGE INTO $table USING DUAL ON ($where)"]
        if update_row:
            parts.append("WHEN MATCHED THEN UPDATE SET $assignments")
        parts.append("WHEN NOT MATCHED THEN INSERT ($columns) VALUES ($values)")
        return render(
            " ".join(parts),
            table=compiler.quote_table(table),
            where=predicate,
            assignments=self._assignments(update_row, model_attributes),
            columns=",".join(compiler.quote_identifier(column) for column in insert_row),
            values=",".join(
                self._escape(column, value, model_attributes)
                for column, value in insert_row.items()
            ),
        )

    # ------------------------------------------------------------------
    # Row limiting
    # ------------------------------------------------------------------

    def limit_offset_fragment(self, limit: int | None = None, offset: int | None = None) -> str:
        """Render the Oracle 12c row-limiting clause, with a leading space.

        Returns ``""`` when neither ``limit`` nor ``offset`` is given.
        """
        fragment = ""
        if offset:
            fragment += f" OFFSET {_row_count(offset, 'offset')} ROWS"
        if limit is not None:
            fragment += f" FETCH NEXT {_row_count(limit, 'limit')} ROWS ONLY"
        return fragment

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _assignments(self, row: Mapping[str, Any], model_attributes: ModelAttributes) -> str:
        compiler = self._ctx.compiler
        return ",".join(
            f"{compiler.quote_identifier(column)}={self._escape(column, value, model_attributes)}"
            for column, value in row.items()
        )

    def _escape(self, column: str, value: Any, model_attributes: ModelAttributes) -> str:
        hint = model_attributes.get(column) if model_attributes else None
        return self._ctx.compiler.escape(value, hint)


def _require_columns(columns: Sized, table: TableLike) -> None:
    """Raise when an INSERT would have an empty column list."""
    if not columns:
        raise GenerationError(
            "An INSERT needs at least one column value.",
            code="EMPTY_INSERT",
            details={"table": str(table)},
        )


def _row_count(value: Any, name: str) -> int:
    """Return ``value`` as a non-negative ``int`` or raise."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise GenerationError(
            f"{name} must be a non-negative integer, got {value!r}.",
            code="INVALID_ROW_COUNT",
            details={name: repr(value)},
        )
    return value
