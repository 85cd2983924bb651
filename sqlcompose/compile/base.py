"""Compiler abstractions: the DialectCompiler ABC and the MISSING sentinel.

The Template Method pattern (GoF) is used:
- ``DialectCompiler`` defines the literal-escaping algorithm and the
  identifier/table quoting skeleton.
- ``OracleCompiler`` overrides the dialect-specific steps (quote character,
  boolean and date literal forms, enum substitute type, insert modifiers).

Every generator reaches caller-supplied text only through
:meth:`DialectCompiler.quote_identifier` (names) and
:meth:`DialectCompiler.escape` (values).
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlcompose.errors import EscapeError
from sqlcompose.schema.attributes import AttributeDefinition
from sqlcompose.schema.table import TableLike, TableReference


class _Missing:
    """Marks a column absent from a row (as opposed to an explicit ``None``)."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class DialectCompiler(ABC):
    """Abstract base for dialect-specific quoting and escaping.

    Subclasses implement the dialect-specific methods; the generators use
    this interface via the Strategy / Template Method patterns.
    """

    #: Token rendered for ``None`` and :data:`MISSING`.
    null_literal: str = "NULL"

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (e.g. ``'oracle'``)."""

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Return a properly-quoted SQL identifier.

        Args:
            name: Unquoted identifier (schema, table, column or index name).

        Returns:
            Quoted identifier.
        """

    @abstractmethod
    def boolean_literal(self, value: bool) -> str:
        """Return the dialect's representation of a boolean value."""

    @abstractmethod
    def datetime_literal(self, value: datetime) -> str:
        """Return the dialect's literal form for a timestamp."""

    @abstractmethod
    def date_literal(self, value: date) -> str:
        """Return the dialect's literal form for a calendar date."""

    @property
    @abstractmethod
    def enum_substitute_type(self) -> str:
        """Column type used for enumerations the dialect cannot represent."""

    @property
    @abstractmethod
    def ignore_modifier(self) -> str:
        """Token placed right after ``INSERT`` to skip duplicate rows."""

    # ------------------------------------------------------------------
    # Quoting
    # ------------------------------------------------------------------

    def quote_table(self, table: TableLike) -> str:
        """Quote a table name, qualifying it with its schema when present.

        Args:
            table: A :class:`TableReference` or a plain table name.

        Returns:
            ``"schema"."table"`` or ``"table"``.
        """
        ref = TableReference.coerce(table)
        if ref.schema_name:
            return f"{self.quote_identifier(ref.schema_name)}.{self.quote_identifier(ref.name)}"
        return self.quote_identifier(ref.name)

    # ------------------------------------------------------------------
    # Escaping
    # ------------------------------------------------------------------

    def escape(self, value: Any, attribute: AttributeDefinition | None = None) -> str:
        """Convert ``value`` into literal SQL text.

        Args:
            value: The Python value to render.
            attribute: Optional column definition used as a type hint.
                Textual ``"true"`` / ``"false"`` on a boolean column are
                rendered as booleans.

        Returns:
            Literal SQL text, safe to interpolate.

        Raises:
            EscapeError: If the value has no literal representation.
        """
        if value is None or value is MISSING:
            return self.null_literal
        if isinstance(value, bool):
            return self.boolean_literal(value)
        if attribute is not None and attribute.is_boolean and value in ("true", "false"):
            return self.boolean_literal(value == "true")
        if isinstance(value, str):
            return self.escape_string(value)
        if isinstance(value, int):
            return str(value)
        if isinstance(value, (float, Decimal)):
            return self._escape_number(value)
        # datetime subclasses date; check it first.
        if isinstance(value, datetime):
            return self.datetime_literal(value)
        if isinstance(value, date):
            return self.date_literal(value)
        if isinstance(value, (bytes, bytearray)):
            return self.bytes_literal(bytes(value))
        if isinstance(value, (list, tuple)):
            return ", ".join(self.escape(item, attribute) for item in value)
        raise EscapeError(
            f"Cannot render a value of type {type(value).__name__} as a SQL literal.",
            value_type=type(value).__name__,
        )

    def escape_string(self, value: str) -> str:
        """Quote ``value`` with single quotes, doubling embedded quotes."""
        if "\x00" in value:
            raise EscapeError("String literals may not contain NUL characters.", value_type="str")
        escaped = value.replace("'", "''")
        return f"'{escaped}'"

    def bytes_literal(self, value: bytes) -> str:
        return f"X'{value.hex().upper()}'"

    @staticmethod
    def _escape_number(value: float | Decimal) -> str:
        if isinstance(value, Decimal):
            finite = value.is_finite()
        else:
            finite = math.isfinite(value)
        if not finite:
            raise EscapeError(
                f"Non-finite number {value!r} has no SQL literal form.",
                value_type=type(value).__name__,
            )
        return str(value) if isinstance(value, Decimal) else repr(value)
