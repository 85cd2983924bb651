"""Column definition → DDL fragment mapping.

The mapper renders each :class:`~sqlcompose.schema.attributes.AttributeDefinition`
as a :class:`ColumnFragment`: an ordered tuple of tagged :class:`ColumnPart`
objects rather than one opaque string.  Part order is fixed::

    TYPE  CHECK  NOT_NULL  DEFAULT  UNIQUE  PRIMARY_KEY  REFERENCES  ON_DELETE

Boolean-default normalization
-----------------------------
Oracle has no boolean literal.  :func:`normalize_boolean_defaults` walks the
parts of an already-built fragment and rewrites only ``DEFAULT`` parts whose
semantic value is a boolean (``True`` / ``False``, or ``"true"`` /
``"false"`` on a boolean-typed column) to ``DEFAULT 1`` / ``DEFAULT 0``.
Because the pass works on tagged parts, a column *named* ``true`` or a
``CHECK`` listing ``'false'`` is never touched.

Raw string definitions are accepted only when they read as a type followed
by the clauses listed above (``NOT NULL``, ``DEFAULT <literal>``, quoted
``REFERENCES`` and so on).  They cannot be tagged, so they go through
:func:`replace_boolean_defaults`, a pattern anchored to the ``DEFAULT``
keyword.
"""
from __future__ import annotations

import enum
import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Union

import structlog

from sqlcompose.compile.context import GenerationContext
from sqlcompose.errors import EmptyEnumerationError, InvalidDefinitionError
from sqlcompose.schema.attributes import AttributeDefinition, default_value_schemable

logger = structlog.get_logger(__name__)

#: Column input accepted by the mapper: a definition or raw DDL text.
ColumnSpec = Union[AttributeDefinition, str]

# A type name with at most one balanced size group, then keyword words:
# ``NUMBER(10, 2)``, ``VARCHAR2(40 CHAR)``, ``TIMESTAMP(6) WITH TIME ZONE``,
# ``INTERVAL DAY(2) TO SECOND(6)``.
_SQL_TYPE = (
    r"[A-Za-z][A-Za-z0-9_]*"
    r"(?:\s*\(\s*\d+(?:\s*,\s*\d+)?(?:\s+(?:CHAR|BYTE))?\s*\))?"
    r"(?:\s+[A-Za-z][A-Za-z0-9_]*(?:\(\d+\))?)*"
)
_SQL_TYPE_PATTERN = re.compile(_SQL_TYPE, re.IGNORECASE)

# Raw definitions: a type followed by the clauses the mapper itself emits.
_LITERAL = r"(?:-?\d+(?:\.\d+)?|'(?:[^'\x00]|'')*'|NULL|TRUE|FALSE)"
_QUOTED_IDENTIFIER = r'"(?:[^"\x00]|"")+"'
_CLAUSE = (
    r"(?:NOT\s+NULL|NULL|UNIQUE|PRIMARY\s+KEY"
    rf"|DEFAULT\s+{_LITERAL}"
    rf"|REFERENCES\s+{_QUOTED_IDENTIFIER}(?:\.{_QUOTED_IDENTIFIER})?\s*\(\s*{_QUOTED_IDENTIFIER}\s*\)"
    r"|ON\s+DELETE\s+(?:CASCADE|SET\s+NULL))"
)
_RAW_DEFINITION_PATTERN = re.compile(rf"\s*{_SQL_TYPE}(?:\s+{_CLAUSE})*\s*", re.IGNORECASE)

# Actions Oracle accepts after ON DELETE.  NO ACTION / RESTRICT are the
# default behaviour and have no clause of their own.
_ON_DELETE_ACTIONS: frozenset[str] = frozenset({"CASCADE", "SET NULL"})
_IMPLICIT_ACTIONS: frozenset[str] = frozenset({"NO ACTION", "RESTRICT"})

_BOOLEAN_DEFAULT_PATTERN = re.compile(r"\bDEFAULT\s+(?:'(true|false)'|(true|false)\b)")


class PartKind(str, enum.Enum):
    """Tag identifying what a :class:`ColumnPart` contributes."""

    TYPE = "TYPE"
    CHECK = "CHECK"
    NOT_NULL = "NOT_NULL"
    DEFAULT = "DEFAULT"
    UNIQUE = "UNIQUE"
    PRIMARY_KEY = "PRIMARY_KEY"
    REFERENCES = "REFERENCES"
    ON_DELETE = "ON_DELETE"
    RAW = "RAW"


@dataclass(frozen=True)
class ColumnPart:
    """One rendered piece of a column definition.

    Attributes:
        kind: What this part contributes.
        text: Rendered SQL for this part.
        value: Semantic value behind the text (the default value for
            ``DEFAULT`` parts, ``None`` otherwise).
    """

    kind: PartKind
    text: str
    value: Any = None


@dataclass(frozen=True)
class ColumnFragment:
    """The full definition of one column, minus its name.

    Attributes:
        column: Physical column name.
        parts: Tagged parts in rendering order.
        is_boolean: Whether the column's declared type is boolean.
    """

    column: str
    parts: tuple[ColumnPart, ...]
    is_boolean: bool = False

    def part(self, kind: PartKind) -> ColumnPart | None:
        """Return the first part of ``kind``, or ``None``."""
        for item in self.parts:
            if item.kind is kind:
                return item
        return None

    def __str__(self) -> str:
        return " ".join(item.text for item in self.parts)


def replace_boolean_defaults(sql: str) -> str:
    """Rewrite ``DEFAULT true`` / ``DEFAULT 'false'`` to ``DEFAULT 1`` / ``DEFAULT 0``.

    Only text directly following the ``DEFAULT`` keyword is affected.
    """

    def _sub(match: re.Match[str]) -> str:
        token = match.group(1) or match.group(2)
        return "DEFAULT 1" if token == "true" else "DEFAULT 0"

    return _BOOLEAN_DEFAULT_PATTERN.sub(_sub, sql)


def normalize_boolean_defaults(fragment: ColumnFragment, ctx: GenerationContext) -> ColumnFragment:
    """Return ``fragment`` with boolean ``DEFAULT`` parts in dialect form."""
    parts: list[ColumnPart] = []
    for item in fragment.parts:
        if item.kind is PartKind.DEFAULT:
            flag = _boolean_value(item.value, fragment.is_boolean)
            if flag is not None:
                literal = ctx.compiler.boolean_literal(flag)
                item = replace(item, text=f"DEFAULT {literal}")
        elif item.kind is PartKind.RAW:
            item = replace(item, text=replace_boolean_defaults(item.text))
        parts.append(item)
    return replace(fragment, parts=tuple(parts))


def _boolean_value(value: Any, is_boolean_column: bool) -> bool | None:
    if isinstance(value, bool):
        return value
    if is_boolean_column and value in ("true", "false"):
        return value == "true"
    return None


def find_auto_increment_fields(attributes: Mapping[str, ColumnSpec]) -> list[str]:
    """Return the names of attributes flagged ``auto_increment``."""
    return [
        name
        for name, attribute in attributes.items()
        if isinstance(attribute, AttributeDefinition) and attribute.auto_increment
    ]


class TypeMapper:
    """Turns attribute definitions into column fragments.

    Args:
        ctx: Shared generation context (compiler and config).
    """

    def __init__(self, ctx: GenerationContext) -> None:
        self._ctx = ctx

    def to_column_fragments(
        self, attributes: Mapping[str, ColumnSpec]
    ) -> dict[str, ColumnFragment]:
        """Build one fragment per attribute, keyed by physical column name.

        Args:
            attributes: Attribute name → definition (or raw DDL text).

        Returns:
            Ordered mapping of column name → :class:`ColumnFragment`, before
            boolean-default normalization.

        Raises:
            EmptyEnumerationError: If an enum attribute has no values.
            InvalidDefinitionError: If a type name, raw definition or
                referential action cannot be rendered.
        """
        result: dict[str, ColumnFragment] = {}
        for name, attribute in attributes.items():
            if isinstance(attribute, AttributeDefinition):
                column = attribute.field or name
                result[column] = self.build_fragment(column, attribute)
            else:
                if not _RAW_DEFINITION_PATTERN.fullmatch(attribute):
                    raise InvalidDefinitionError(name, "definition", attribute)
                result[name] = ColumnFragment(
                    column=name, parts=(ColumnPart(PartKind.RAW, attribute),)
                )
        return result

    def attributes_to_sql(self, attributes: Mapping[str, ColumnSpec]) -> dict[str, str]:
        """Render normalized column definitions as text, keyed by column name."""
        return {
            column: str(normalize_boolean_defaults(fragment, self._ctx))
            for column, fragment in self.to_column_fragments(attributes).items()
        }

    def build_fragment(self, column: str, attribute: AttributeDefinition) -> ColumnFragment:
        compiler = self._ctx.compiler
        parts: list[ColumnPart] = []

        if attribute.is_enum:
            parts.append(ColumnPart(PartKind.TYPE, compiler.enum_substitute_type))
            parts.append(self._check_part(column, attribute))
        else:
            if not _SQL_TYPE_PATTERN.fullmatch(attribute.sql_type):
                raise InvalidDefinitionError(column, "sql_type", attribute.sql_type)
            parts.append(ColumnPart(PartKind.TYPE, attribute.sql_type))

        if not attribute.allow_null:
            parts.append(ColumnPart(PartKind.NOT_NULL, "NOT NULL"))

        if attribute.has_default and default_value_schemable(attribute.default_value):
            literal = compiler.escape(attribute.default_value)
            parts.append(
                ColumnPart(PartKind.DEFAULT, f"DEFAULT {literal}", attribute.default_value)
            )

        if attribute.unique:
            parts.append(ColumnPart(PartKind.UNIQUE, "UNIQUE"))

        if attribute.primary_key:
            parts.append(ColumnPart(PartKind.PRIMARY_KEY, "PRIMARY KEY"))

        if attribute.references is not None:
            parts.extend(self._reference_parts(column, attribute))

        return ColumnFragment(column=column, parts=tuple(parts), is_boolean=attribute.is_boolean)

    def _check_part(self, column: str, attribute: AttributeDefinition) -> ColumnPart:
        if not attribute.enum_values:
            raise EmptyEnumerationError(column)
        compiler = self._ctx.compiler
        values = ", ".join(compiler.escape(value) for value in attribute.enum_values)
        return ColumnPart(
            PartKind.CHECK, f"CHECK ({compiler.quote_identifier(column)} IN ({values}))"
        )

    def _reference_parts(self, column: str, attribute: AttributeDefinition) -> list[ColumnPart]:
        compiler = self._ctx.compiler
        ref = attribute.references
        key = ref.key or self._ctx.config.default_reference_key
        parts = [
            ColumnPart(
                PartKind.REFERENCES,
                f"REFERENCES {compiler.quote_table(ref.table)} ({compiler.quote_identifier(key)})",
            )
        ]

        if ref.on_delete:
            action = " ".join(ref.on_delete.upper().split())
            if action in _ON_DELETE_ACTIONS:
                parts.append(ColumnPart(PartKind.ON_DELETE, f"ON DELETE {action}"))
            elif action not in _IMPLICIT_ACTIONS:
                raise InvalidDefinitionError(column, "on_delete", ref.on_delete)

        if ref.on_update:
            logger.debug("type_mapper.on_update_dropped", column=column, action=ref.on_update)

        return parts
