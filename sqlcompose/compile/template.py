"""Single-pass placeholder substitution shared by every generator.

Templates use ``$name`` placeholders::

    render("ALTER TABLE $table DROP COLUMN $column;", table=t, column=c)

Each placeholder is replaced exactly once in one left-to-right scan.  The
substituted fragments are never scanned again, so a value that happens to
contain ``$table`` stays literal text.  Fragments must already be quoted or
escaped by the caller.
"""
from __future__ import annotations

from string import Template

from sqlcompose.errors import UnresolvedPlaceholderError


class SQLTemplate(Template):
    """``string.Template`` restricted to identifier-style placeholders."""

    idpattern = r"[a-z_][a-z0-9_]*"


def render(template: str, **fragments: str) -> str:
    """Fill ``template`` with ``fragments``.

    Args:
        template: Template text with ``$name`` placeholders.
        **fragments: Already-safe SQL text for each placeholder.  Unused
            fragments are ignored.

    Returns:
        The rendered SQL text.

    Raises:
        UnresolvedPlaceholderError: If a placeholder has no fragment, or
            the template contains a malformed placeholder.
    """
    try:
        return SQLTemplate(template).substitute(fragments)
    except KeyError as exc:
        raise UnresolvedPlaceholderError(str(exc.args[0]), template) from exc
    except ValueError as exc:
        raise UnresolvedPlaceholderError(_invalid_placeholder(template), template) from exc


def _invalid_placeholder(template: str) -> str:
    """Return the text following the first stray ``$`` for error reporting."""
    index = template.find("$")
    return template[index : index + 16] if index >= 0 else ""
