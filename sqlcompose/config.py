"""Generator-wide configuration.

``GeneratorConfig`` holds the defaults every generator reads.  It is a frozen
value object: share one instance across threads and pass per-call overrides
through :class:`~sqlcompose.schema.options.QueryOptions` instead of mutating
it.

Example::

    config = GeneratorConfig(
        default_options=QueryOptions(omit_null=True),
        schema_password="s3cret",
    )
    generator = QueryGenerator(OracleCompiler(), config)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from sqlcompose.schema.options import QueryOptions

# Privileges are rendered as keywords, never quoted.
_PRIVILEGE_PATTERN = re.compile(r"^[A-Za-z_]+( [A-Za-z_]+)*$")

#: Privileges granted to a schema principal created by ``create_schema``.
DEFAULT_SCHEMA_PRIVILEGES: tuple[str, ...] = (
    "create session",
    "create table",
    "create view",
    "create any trigger",
    "create any procedure",
    "create sequence",
    "create synonym",
    "UNLIMITED TABLESPACE",
)


@dataclass(frozen=True)
class GeneratorConfig:
    """Defaults applied to every generated statement.

    Attributes:
        default_options: Options merged under each call's own options.
        schema_password: Password given to principals created by
            ``create_schema``.
        schema_privileges: Privileges granted to newly created principals,
            in grant order.
        default_reference_key: Referenced column used when a foreign key
            names no key.
    """

    default_options: QueryOptions = field(default_factory=QueryOptions)
    schema_password: str = "12345"
    schema_privileges: tuple[str, ...] = DEFAULT_SCHEMA_PRIVILEGES
    default_reference_key: str = "id"

    def __post_init__(self) -> None:
        for privilege in self.schema_privileges:
            if not _PRIVILEGE_PATTERN.match(privilege):
                raise ValueError(f"Invalid privilege name: {privilege!r}")
