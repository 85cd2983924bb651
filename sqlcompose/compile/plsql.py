"""Typed steps for idempotent DDL run inside anonymous PL/SQL blocks.

Oracle has no ``CREATE USER IF NOT EXISTS`` or ``DROP TABLE IF EXISTS``.
Both are emulated with an anonymous block that counts matching catalog rows
and only runs the DDL dynamically when the count is what it expects::

    DECLARE V_COUNT INTEGER; V_CURSOR_NAME INTEGER; V_RET INTEGER;
    BEGIN
      SELECT COUNT(1) INTO V_COUNT FROM USER_TABLES WHERE TABLE_NAME = 'users';
      IF V_COUNT = 1 THEN ... END IF;
    END;

Each piece is a small value object with its own ``render``, so the catalog
check, the dynamic statement and the surrounding block can be tested in
isolation, and a caller can inspect a block without parsing its text.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from sqlcompose.compile.base import DialectCompiler
from sqlcompose.compile.template import render

COUNT_VARIABLE = "V_COUNT"
CURSOR_VARIABLE = "V_CURSOR_NAME"
RESULT_VARIABLE = "V_RET"


class ProceduralStep(Protocol):
    """A statement inside a conditional block."""

    statement: str

    def render(self, compiler: DialectCompiler) -> str: ...


@dataclass(frozen=True)
class ExistenceCheck:
    """Counts catalog rows matching every ``(column, value)`` predicate.

    Attributes:
        catalog: Catalog view to query (e.g. ``ALL_USERS``).
        predicates: Catalog column / expected value pairs, ANDed together.
            Values are escaped as literals when rendered.
        into: Variable receiving the count.
    """

    catalog: str
    predicates: tuple[tuple[str, Any], ...]
    into: str = COUNT_VARIABLE

    def render(self, compiler: DialectCompiler) -> str:
        conditions = " AND ".join(
            f"{column} = {compiler.escape(value)}" for column, value in self.predicates
        )
        return render(
            "SELECT COUNT(1) INTO $into FROM $catalog WHERE $conditions;",
            into=self.into,
            catalog=self.catalog,
            conditions=conditions,
        )

    def matches(self, row: dict[str, Any]) -> bool:
        """Return ``True`` when a catalog row satisfies every predicate."""
        return all(row.get(column) == value for column, value in self.predicates)


@dataclass(frozen=True)
class ExecuteImmediate:
    """Runs ``statement`` through ``EXECUTE IMMEDIATE``.

    Attributes:
        statement: Complete, already-quoted SQL statement.  It is embedded
            as an escaped string literal.
    """

    statement: str

    def render(self, compiler: DialectCompiler) -> str:
        return render("EXECUTE IMMEDIATE $statement;", statement=compiler.escape_string(self.statement))


@dataclass(frozen=True)
class DbmsSqlExecute:
    """Opens a cursor, parses ``statement`` and executes it via ``DBMS_SQL``.

    The cursor is not closed explicitly; it is released when the block ends.
    """

    statement: str
    cursor: str = CURSOR_VARIABLE
    result: str = RESULT_VARIABLE

    def render(self, compiler: DialectCompiler) -> str:
        return render(
            "$cursor := DBMS_SQL.OPEN_CURSOR; "
            "DBMS_SQL.PARSE($cursor, $statement, DBMS_SQL.NATIVE); "
            "$result := DBMS_SQL.EXECUTE($cursor);",
            cursor=self.cursor,
            result=self.result,
            statement=compiler.escape_string(self.statement),
        )


@dataclass(frozen=True)
class ConditionalBlock:
    """Runs ``steps`` only when ``check`` counts exactly ``expected_count`` rows."""

    check: ExistenceCheck
    expected_count: int
    steps: tuple[ProceduralStep, ...]

    def should_run(self, count: int) -> bool:
        return count == self.expected_count

    def render(self, compiler: DialectCompiler) -> str:
        return render(
            "$check IF $into = $expected THEN $steps END IF;",
            check=self.check.render(compiler),
            into=self.check.into,
            expected=str(self.expected_count),
            steps=" ".join(step.render(compiler) for step in self.steps),
        )


@dataclass(frozen=True)
class ProceduralBlock:
    """An anonymous ``DECLARE … BEGIN … END;`` block.

    ``str(block)`` renders the whole block on one line.

    Attributes:
        body: Conditional sections, run in order.
        compiler: Dialect used to render literals.
        variables: Integer variables to declare.
    """

    body: tuple[ConditionalBlock, ...]
    compiler: DialectCompiler = field(compare=False, repr=False)
    variables: tuple[str, ...] = (COUNT_VARIABLE, CURSOR_VARIABLE, RESULT_VARIABLE)

    @property
    def steps(self) -> list[ProceduralStep]:
        """All dynamic statements in the block, in execution order."""
        return [step for section in self.body for step in section.steps]

    def render(self) -> str:
        return render(
            "DECLARE $declarations BEGIN $body END;",
            declarations=" ".join(f"{name} INTEGER;" for name in self.variables),
            body=" ".join(section.render(self.compiler) for section in self.body),
        )

    def __str__(self) -> str:
        return self.render()
