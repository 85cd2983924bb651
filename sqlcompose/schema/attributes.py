"""Pydantic models describing table columns for DDL generation.

An :class:`AttributeDefinition` is the fully-resolved description of one
column, produced by the calling mapping layer.  The type mapper turns a
mapping of these into column fragments.

Example::

    attributes = {
        "id": AttributeDefinition(sql_type="NUMBER", primary_key=True),
        "status": AttributeDefinition(
            sql_type="ENUM",
            enum_values=["draft", "published"],
            allow_null=False,
            default_value="draft",
        ),
        "author_id": AttributeDefinition(
            sql_type="NUMBER",
            references=ReferenceSpec(table="authors", on_delete="cascade"),
        ),
    }
"""
from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from sqlcompose.schema.table import TableReference

#: Type names treated as boolean when normalizing defaults.
BOOLEAN_TYPES: frozenset[str] = frozenset({"BOOLEAN", "BOOL", "NUMBER(1)", "TINYINT(1)"})


class RuntimeDefault(str, enum.Enum):
    """Defaults evaluated by the application at insert time.

    These have no literal form and are never rendered as a ``DEFAULT``
    clause.
    """

    NOW = "NOW"
    UUIDV1 = "UUIDV1"
    UUIDV4 = "UUIDV4"


class ReferenceSpec(BaseModel):
    """A foreign-key reference from one column to another table.

    Attributes:
        table: Referenced table (name or :class:`TableReference`).
        key: Referenced column; ``"id"`` is used when omitted.
        on_delete: Referential action for deletes (e.g. ``"cascade"``).
        on_update: Referential action for updates.  Accepted for parity
            with other dialects but never rendered: Oracle has no
            ``ON UPDATE`` clause.
    """

    model_config = ConfigDict(extra="forbid")

    table: TableReference | str
    key: str | None = None
    on_delete: str | None = None
    on_update: str | None = None


class AttributeDefinition(BaseModel):
    """Metadata for a single column.

    ``default_value`` is only considered when it was supplied explicitly, so
    ``default_value=None`` renders ``DEFAULT NULL`` while leaving the field
    out renders no default at all.

    Attributes:
        sql_type: SQL type text (e.g. ``'NUMBER'``, ``'VARCHAR2(40)'``,
            ``'ENUM'``).
        allow_null: Whether the column accepts NULL.
        default_value: Literal default, a :class:`RuntimeDefault`, or a
            callable (the last two are never rendered).
        unique: Adds a ``UNIQUE`` constraint.
        primary_key: Adds a ``PRIMARY KEY`` constraint.
        auto_increment: Marks the column as generated by the database.
        enum_values: Allowed values for enumeration types, in order.
        references: Foreign-key target.
        field: Physical column name when it differs from the attribute key.
        comment: Free-form description; not rendered.
    """

    model_config = ConfigDict(extra="forbid")

    sql_type: str
    allow_null: bool = True
    default_value: Any = None
    unique: bool = False
    primary_key: bool = False
    auto_increment: bool = False
    enum_values: list[Any] | None = None
    references: ReferenceSpec | None = None
    field: str | None = None
    comment: str | None = None

    @property
    def has_default(self) -> bool:
        """True when ``default_value`` was passed explicitly."""
        return "default_value" in self.model_fields_set

    @property
    def is_enum(self) -> bool:
        """True when ``sql_type`` names an enumeration."""
        normalized = self.sql_type.strip().upper()
        return normalized == "ENUM" or normalized.startswith("ENUM(")

    @property
    def is_boolean(self) -> bool:
        return self.sql_type.strip().upper() in BOOLEAN_TYPES


def default_value_schemable(value: Any) -> bool:
    """Return ``True`` when ``value`` can be written as a DDL literal.

    Runtime defaults (``NOW``, ``UUIDV4``…) and callables are evaluated by
    the application, not the database, so they are left out of the DDL.
    """
    if isinstance(value, RuntimeDefault):
        return False
    if callable(value):
        return False
    return True
