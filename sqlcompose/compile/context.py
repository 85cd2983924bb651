"""Generation context value object.

Packages the ``(compiler, config)`` data clump shared by every generator
into a single cohesive object.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sqlcompose.compile.base import DialectCompiler
from sqlcompose.config import GeneratorConfig
from sqlcompose.schema.options import QueryOptions


@dataclass(frozen=True)
class GenerationContext:
    """Immutable context shared by the generators of one ``QueryGenerator``.

    Attributes:
        compiler: Dialect-specific quoting and escaping strategy.
        config: Generator-wide defaults.
    """

    compiler: DialectCompiler
    config: GeneratorConfig = field(default_factory=GeneratorConfig)

    def options(self, overrides: QueryOptions | dict[str, Any] | None = None) -> QueryOptions:
        """Return the configured default options with ``overrides`` applied."""
        return self.config.default_options.merged(overrides)
