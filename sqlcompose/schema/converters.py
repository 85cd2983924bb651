"""Utilities for building attribute definitions from external sources.

SQLAlchemy converter
--------------------
:func:`attributes_from_sqlalchemy` reads a SQLAlchemy
:class:`~sqlalchemy.schema.Table` and returns the attribute map expected by
``create_table_query``.

Install the optional dependency before using this module::

    pip install "sqlcompose[sqlalchemy]"

Example::

    from sqlalchemy import Column, Integer, MetaData, String, Table
    from sqlcompose.schema.converters import attributes_from_sqlalchemy

    users = Table(
        "users", MetaData(),
        Column("id", Integer, primary_key=True),
        Column("email", String(120), nullable=False, unique=True),
    )
    sql = generator.create_table_query("users", attributes_from_sqlalchemy(users))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from sqlcompose.schema.attributes import AttributeDefinition, ReferenceSpec
from sqlcompose.schema.table import TableReference

if TYPE_CHECKING:
    from sqlalchemy import Column, Table

logger = structlog.get_logger(__name__)


def attributes_from_sqlalchemy(table: Table) -> dict[str, AttributeDefinition]:
    """Build an attribute map from a SQLAlchemy :class:`Table`.

    Column types are compiled with SQLAlchemy's Oracle dialect, except
    ``Enum`` (→ ``ENUM`` with its values) and ``Boolean`` (→ ``NUMBER(1)``).
    Python-side scalar defaults are carried over; callable defaults are kept
    as callables so they are left out of the DDL.  Server defaults are SQL
    expressions, not literals, and are skipped.  Only single-column foreign
    keys are converted.

    Args:
        table: The table to convert.

    Returns:
        Column key → :class:`AttributeDefinition`, in column order.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """
    try:
        from sqlalchemy.dialects import oracle
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for attributes_from_sqlalchemy(). "
            'Install it with: pip install "sqlcompose[sqlalchemy]"'
        ) from exc

    dialect = oracle.dialect()
    autoincrement_column = table.autoincrement_column
    attributes: dict[str, AttributeDefinition] = {}
    for column in table.columns:
        fields: dict[str, Any] = {
            "sql_type": _column_type(column, dialect),
            "allow_null": bool(column.nullable),
            "unique": bool(column.unique),
            "primary_key": bool(column.primary_key),
            "auto_increment": column is autoincrement_column,
            "references": _reference(column),
            "comment": column.comment,
        }
        if column.name != column.key:
            fields["field"] = column.name

        enum_values = getattr(column.type, "enums", None)
        if enum_values is not None:
            fields["enum_values"] = list(enum_values)

        default = column.default
        if default is not None and (default.is_scalar or default.is_callable):
            fields["default_value"] = default.arg
        if column.server_default is not None:
            logger.debug("converters.server_default_skipped", table=table.name, column=column.name)

        attributes[column.key] = AttributeDefinition(**fields)
    return attributes


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _column_type(column: Column, dialect: Any) -> str:
    from sqlalchemy import Boolean, Enum
    from sqlalchemy.exc import CompileError

    if isinstance(column.type, Enum):
        return "ENUM"
    if isinstance(column.type, Boolean):
        return "NUMBER(1)"
    try:
        return column.type.compile(dialect=dialect)
    except CompileError:
        # e.g. VARCHAR without a length, which Oracle rejects.
        return "VARCHAR2(4000)"


def _reference(column: Column) -> ReferenceSpec | None:
    if len(column.foreign_keys) != 1:
        return None
    fk = next(iter(column.foreign_keys))
    # "table.column" or "schema.table.column"; the target Table need not be
    # in the same MetaData.
    parts = fk.target_fullname.split(".")
    target = TableReference(
        name=parts[-2],
        schema_name=parts[-3] if len(parts) > 2 else None,
    )
    return ReferenceSpec(
        table=target,
        key=parts[-1],
        on_delete=fk.ondelete,
        on_update=fk.onupdate,
    )
