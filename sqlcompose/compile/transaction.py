"""Transaction boundary and isolation-level statements."""
from __future__ import annotations

from typing import Any

from sqlcompose.compile.context import GenerationContext
from sqlcompose.compile.template import render
from sqlcompose.errors import UnknownIsolationLevelError
from sqlcompose.schema.options import IsolationLevel, QueryOptions, Transaction

_ISOLATION_STATEMENTS: dict[IsolationLevel, str] = {
    IsolationLevel.READ_UNCOMMITTED: "PRAGMA read_uncommitted = ON;",
    IsolationLevel.READ_COMMITTED: "PRAGMA read_uncommitted = OFF;",
    IsolationLevel.REPEATABLE_READ: (
        "-- The isolation level REPEATABLE READ cannot be selected; the session default applies."
    ),
    IsolationLevel.SERIALIZABLE: "-- The default isolation level is SERIALIZABLE. Nothing to do.",
}


class TransactionGenerator:
    """Builds transaction control statements.

    Args:
        ctx: Shared generation context.
    """

    def __init__(self, ctx: GenerationContext) -> None:
        self._ctx = ctx

    def start_transaction_query(
        self,
        transaction: Transaction,
        options: QueryOptions | dict[str, Any] | None = None,
    ) -> str:
        """Start ``transaction``, or mark a savepoint when it is nested.

        A transaction is nested when ``options.parent`` or
        ``transaction.parent`` is set.
        """
        opts = self._ctx.options(options)
        name = self._ctx.compiler.quote_identifier(transaction.name)
        if opts.parent is not None or transaction.parent is not None:
            return render("SAVEPOINT $name;", name=name)
        return render("SET TRANSACTION NAME $name;", name=name)

    def commit_transaction_query(self, transaction: Transaction) -> str:
        """Return ``COMMIT;``, or ``""`` for nested transactions.

        Savepoints are released by committing the outermost transaction.
        """
        if transaction.parent is not None:
            return ""
        return "COMMIT;"

    def rollback_transaction_query(self, transaction: Transaction) -> str:
        if transaction.parent is not None:
            return render(
                "ROLLBACK TO SAVEPOINT $name;",
                name=self._ctx.compiler.quote_identifier(transaction.name),
            )
        return "ROLLBACK;"

    def set_autocommit_query(self, enabled: bool = True) -> str:
        return "SET AUTOCOMMIT ON;" if enabled else "SET AUTOCOMMIT OFF;"

    def set_isolation_level_query(self, level: IsolationLevel | str) -> str:
        """Return the statement selecting ``level``.

        Levels the session already provides by default render as a comment
        so the result can still be sent to the driver.

        Args:
            level: An :class:`IsolationLevel` member, its name
                (``"READ_COMMITTED"``) or its SQL spelling
                (``"READ COMMITTED"``).

        Raises:
            UnknownIsolationLevelError: For any other value.
        """
        resolved = _resolve_isolation_level(level)
        if resolved is None:
            raise UnknownIsolationLevelError(level, [member.name for member in IsolationLevel])
        return _ISOLATION_STATEMENTS[resolved]


def _resolve_isolation_level(level: object) -> IsolationLevel | None:
    if isinstance(level, IsolationLevel):
        return level
    if not isinstance(level, str):
        return None
    if level in IsolationLevel.__members__:
        return IsolationLevel[level]
    try:
        return IsolationLevel(level)
    except ValueError:
        return None
