"""Pydantic model for a (possibly schema-qualified) table name."""
from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class TableReference(BaseModel):
    """Names a table, optionally inside a schema.

    Generators never interpolate either part directly; both go through the
    compiler's identifier quoter.

    Attributes:
        schema_name: Owning schema (user), or ``None`` for the session's own.
        name: Table name.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    schema_name: str | None = Field(default=None, alias="schema")
    name: str

    @classmethod
    def coerce(cls, table: TableLike) -> TableReference:
        """Return ``table`` as a :class:`TableReference`.

        Plain strings are treated as unqualified table names.
        """
        if isinstance(table, TableReference):
            return table
        return cls(name=table)

    def __str__(self) -> str:
        if self.schema_name:
            return f"{self.schema_name}.{self.name}"
        return self.name


#: Anything accepted where a table is expected.
TableLike = Union[TableReference, str]
