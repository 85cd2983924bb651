"""Dialect registry.

Each dialect is registered once, as a compiler class plus the
:class:`~sqlcompose.config.GeneratorConfig` its generators start from.
:meth:`DialectRegistry.generator` hands out a ready :class:`QueryGenerator`;
a config passed by the caller replaces the registered one.

Names are case-insensitive::

    @DialectRegistry.register("oracle_legacy", GeneratorConfig(schema_password="x"))
    class LegacyOracleCompiler(OracleCompiler):
        ...

    generator = DialectRegistry.generator("ORACLE_LEGACY")
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import ClassVar

from sqlcompose.compile.base import DialectCompiler
from sqlcompose.compile.generator import QueryGenerator
from sqlcompose.config import GeneratorConfig
from sqlcompose.errors import CompilationError


@dataclass(frozen=True)
class DialectEntry:
    """A registered dialect.

    Attributes:
        compiler_cls: Compiler implementation, instantiated per generator.
        config: Defaults for generators of this dialect.
    """

    compiler_cls: type[DialectCompiler]
    config: GeneratorConfig = field(default_factory=GeneratorConfig)


class DialectRegistry:
    """Maps dialect names to :class:`DialectEntry` records."""

    _entries: ClassVar[dict[str, DialectEntry]] = {}

    @classmethod
    def register(
        cls, name: str, config: GeneratorConfig | None = None
    ) -> Callable[[type[DialectCompiler]], type[DialectCompiler]]:
        """Class decorator form of :meth:`add`."""

        def decorator(compiler_cls: type[DialectCompiler]) -> type[DialectCompiler]:
            cls.add(name, compiler_cls, config)
            return compiler_cls

        return decorator

    @classmethod
    def add(
        cls,
        name: str,
        compiler_cls: type[DialectCompiler],
        config: GeneratorConfig | None = None,
    ) -> DialectEntry:
        """Register ``compiler_cls`` under ``name``, replacing any earlier entry.

        Args:
            name: Dialect name; stored lower-cased.
            compiler_cls: :class:`DialectCompiler` subclass.
            config: Dialect defaults; ``GeneratorConfig()`` when omitted.

        Returns:
            The stored entry.
        """
        entry = DialectEntry(compiler_cls, config or GeneratorConfig())
        cls._entries[name.lower()] = entry
        return entry

    @classmethod
    def entry(cls, name: str) -> DialectEntry:
        """Return the entry registered as ``name``.

        Raises:
            CompilationError: If ``name`` is not registered.
        """
        try:
            return cls._entries[name.lower()]
        except KeyError as exc:
            raise CompilationError(
                f"No dialect named '{name}'. Available: {', '.join(cls.names()) or 'none'}.",
                target=name,
            ) from exc

    @classmethod
    def compiler(cls, name: str) -> DialectCompiler:
        """Return a new compiler for ``name``."""
        return cls.entry(name).compiler_cls()

    @classmethod
    def generator(cls, name: str, config: GeneratorConfig | None = None) -> QueryGenerator:
        """Return a :class:`QueryGenerator` for ``name``.

        Args:
            name: Registered dialect name.
            config: Replaces the dialect's registered defaults when given.

        Raises:
            CompilationError: If ``name`` is not registered.
        """
        entry = cls.entry(name)
        return QueryGenerator(entry.compiler_cls(), config or entry.config)

    @classmethod
    def names(cls) -> list[str]:
        """Return the registered dialect names, sorted."""
        return sorted(cls._entries)
