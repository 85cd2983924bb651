"""Oracle dialect compiler."""
from __future__ import annotations

from datetime import date, datetime, timezone

from sqlcompose.compile.base import DialectCompiler


class OracleCompiler(DialectCompiler):
    """Quotes and escapes for Oracle.

    Identifiers are quoted with double-quotes, which also makes them
    case-sensitive.  Oracle has no boolean literal, so booleans are written
    as ``1`` / ``0``, and no enumeration type, so enums are stored as
    ``VARCHAR2(255)`` with a ``CHECK`` constraint.
    """

    @property
    def dialect_name(self) -> str:
        return "oracle"

    @property
    def enum_substitute_type(self) -> str:
        return "VARCHAR2(255)"

    @property
    def ignore_modifier(self) -> str:
        return " OR IGNORE"

    def quote_identifier(self, name: str) -> str:
        if name == "*":
            return name
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def boolean_literal(self, value: bool) -> str:
        return "1" if value else "0"

    def datetime_literal(self, value: datetime) -> str:
        """Render a timestamp with its UTC offset.

        Naive datetimes are taken to be UTC.
        """
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        offset_minutes = int(value.utcoffset().total_seconds()) // 60
        sign = "+" if offset_minutes >= 0 else "-"
        hours, minutes = divmod(abs(offset_minutes), 60)
        text = (
            f"{value:%Y-%m-%d %H:%M:%S}.{value.microsecond // 1000:03d} "
            f"{sign}{hours:02d}:{minutes:02d}"
        )
        return f"TO_TIMESTAMP_TZ('{text}', 'YYYY-MM-DD HH24:MI:SS.FF3 TZH:TZM')"

    def date_literal(self, value: date) -> str:
        return f"TO_DATE('{value:%Y-%m-%d}', 'YYYY-MM-DD')"

    def bytes_literal(self, value: bytes) -> str:
        return f"HEXTORAW('{value.hex().upper()}')"
