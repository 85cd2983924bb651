"""Custom exception hierarchy for sqlcompose.

All public errors inherit from SQLComposeError so callers can catch the base
class for any sqlcompose-specific failure.  Every error is raised at
generation time, before the produced SQL reaches a database.
"""
from __future__ import annotations

from typing import Any


class SQLComposeError(Exception):
    """Base exception for all sqlcompose errors."""


class GenerationError(SQLComposeError):
    """Raised when a structural description cannot be turned into SQL.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. EMPTY_ENUMERATION).
        details: Extra context about the offending input.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response for the calling layer."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class EmptyEnumerationError(GenerationError):
    """Raised when an enumeration column declares no values."""

    def __init__(self, attribute: str) -> None:
        super().__init__(
            f"Values for ENUM attribute '{attribute}' haven't been defined.",
            code="EMPTY_ENUMERATION",
            details={"attribute": attribute},
        )
        self.attribute = attribute


class UnknownIsolationLevelError(GenerationError):
    """Raised when an isolation level is outside the supported set."""

    def __init__(self, level: object, allowed_levels: list[str]) -> None:
        super().__init__(
            f"Unknown isolation level: {level!r}.",
            code="UNKNOWN_ISOLATION_LEVEL",
            details={"level": str(level), "allowed_levels": allowed_levels},
        )
        self.level = level


class UnresolvedPlaceholderError(GenerationError):
    """Raised when a template placeholder has no substitution value.

    This signals a bug in the generator that built the template, not a
    problem with caller input.
    """

    def __init__(self, placeholder: str, template: str) -> None:
        super().__init__(
            f"Template placeholder '{placeholder}' has no value.",
            code="UNRESOLVED_PLACEHOLDER",
            details={"placeholder": placeholder, "template": template},
        )
        self.placeholder = placeholder
        self.template = template


class InvalidDefinitionError(GenerationError):
    """Raised when a column definition carries text that cannot be rendered.

    Covers SQL type names with characters outside the type grammar and
    referential actions the dialect does not support.
    """

    def __init__(self, attribute: str, field: str, value: str) -> None:
        super().__init__(
            f"Attribute '{attribute}' has an unsupported {field}: {value!r}.",
            code="INVALID_DEFINITION",
            details={"attribute": attribute, "field": field, "value": value},
        )


class EscapeError(GenerationError):
    """Raised when a value has no literal representation in the dialect."""

    def __init__(self, message: str, value_type: str) -> None:
        super().__init__(
            message,
            code="UNESCAPABLE_VALUE",
            details={"value_type": value_type},
        )


class CompilationError(SQLComposeError):
    """Raised when a dialect compiler cannot be resolved.

    Args:
        message: Human-readable description.
        target: The dialect target name that was requested.
    """

    def __init__(self, message: str, target: str | None = None) -> None:
        super().__init__(message)
        self.target = target
