"""Per-call options, transactions and isolation levels."""
from __future__ import annotations

import enum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, ValidationError

from sqlcompose.errors import GenerationError


class IsolationLevel(str, enum.Enum):
    """Transaction isolation levels understood by the transaction generator."""

    READ_UNCOMMITTED = "READ UNCOMMITTED"
    READ_COMMITTED = "READ COMMITTED"
    REPEATABLE_READ = "REPEATABLE READ"
    SERIALIZABLE = "SERIALIZABLE"


class Transaction(BaseModel):
    """A named transaction, possibly nested inside a parent.

    Attributes:
        name: Transaction (or savepoint) name.
        parent: Enclosing transaction for nested savepoints.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    parent: Transaction | None = None


class QueryOptions(BaseModel):
    """Caller-supplied options bag, read-only for the duration of a call.

    Attributes:
        omit_null: Drop ``None`` values from insert and update payloads.
        ignore_duplicates: Render ``INSERT OR IGNORE`` for bulk inserts.
        ignore: Render ``INSERT OR IGNORE`` for single-row inserts.
        parent: Parent transaction; turns a transaction start into a
            savepoint.
        limit: Optional row limit for deletes.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    omit_null: bool = False
    ignore_duplicates: bool = False
    ignore: bool = False
    parent: Transaction | None = None
    limit: int | None = None

    def merged(self, overrides: QueryOptions | dict[str, Any] | None) -> QueryOptions:
        """Return a copy with the explicitly-set fields of ``overrides`` applied.

        Raises:
            GenerationError: ``INVALID_OPTIONS`` when a dict override has an
                unknown key or a value of the wrong type.
        """
        if overrides is None:
            return self
        if not isinstance(overrides, QueryOptions):
            try:
                overrides = QueryOptions.model_validate(overrides)
            except ValidationError as exc:
                raise GenerationError(
                    f"Invalid query options: {exc.error_count()} error(s).",
                    code="INVALID_OPTIONS",
                    details={
                        "fields": [".".join(str(loc) for loc in err["loc"]) for err in exc.errors()]
                    },
                ) from exc
        update = {name: getattr(overrides, name) for name in overrides.model_fields_set}
        return self.model_copy(update=update)


@runtime_checkable
class SupportsSQL(Protocol):
    """An already-compiled predicate that can render itself as SQL text."""

    def to_sql(self) -> str: ...


#: WHERE input accepted by DML generators: pre-compiled text or a predicate.
WhereClause = str | SupportsSQL | None
