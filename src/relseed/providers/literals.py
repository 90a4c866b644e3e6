"""
C# literal formatting for generated values.

``format_literal`` turns a typed value into the source text used inside
``HasData`` initializers; ``parse_literal`` reads that text back into the
same value. Both are pure functions.
"""

from __future__ import annotations

import re
import unicodedata
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Optional

from relseed.models import TYPE_ALIASES, EnumValue, RawLiteral, normalize_type_name

NULL_LITERAL = "null"

_SIMPLE_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

_UNESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
}

_DATETIME_RE = re.compile(
    r"^new DateTime\((\d+), (\d+), (\d+), (\d+), (\d+), (\d+)\)$"
)
_DATETIMEOFFSET_RE = re.compile(
    r"^new DateTimeOffset\((\d+), (\d+), (\d+), (\d+), (\d+), (\d+), "
    r"new TimeSpan\((-?\d+), (-?\d+), 0\)\)$"
)
_TIMESPAN_RE = re.compile(r"^new TimeSpan\((-?\d+), (-?\d+), (-?\d+), (-?\d+)\)$")
_GUID_RE = re.compile(r'^new Guid\("([0-9a-fA-F-]{36})"\)$')
_BYTE_RE = re.compile(r"0x([0-9A-Fa-f]{2})")

_BUILTIN_TYPES = frozenset(TYPE_ALIASES.values())


def _is_control(char: str) -> bool:
    return unicodedata.category(char) == "Cc"


def escape_string(value: str, quote: str = '"') -> str:
    """
    Escape a string for use inside a C# string (or char) literal.

    Quotes, backslashes and the common control characters get their short
    escapes; any other control character becomes ``\\uXXXX``.

    Args:
        value: Raw string
        quote: Quote character that must be escaped (``"`` or ``'``)

    Returns:
        Escaped text without surrounding quotes
    """
    parts = []
    for char in value:
        if char == quote == "'":
            parts.append("\\'")
        elif char in _SIMPLE_ESCAPES and not (char == '"' and quote == "'"):
            parts.append(_SIMPLE_ESCAPES[char])
        elif _is_control(char):
            parts.append(f"\\u{ord(char):04X}")
        else:
            parts.append(char)
    return "".join(parts)


def unescape_string(text: str) -> str:
    """Reverse ``escape_string``."""
    chars = []
    i = 0
    while i < len(text):
        char = text[i]
        if char != "\\" or i + 1 >= len(text):
            chars.append(char)
            i += 1
            continue
        code = text[i + 1]
        if code == "u" and i + 6 <= len(text):
            chars.append(chr(int(text[i + 2 : i + 6], 16)))
            i += 6
        else:
            chars.append(_UNESCAPES.get(code, code))
            i += 2
    return "".join(chars)


def format_byte_array(data: bytes) -> str:
    """
    Format bytes as a single-line C# array initializer.

    Example:
        >>> format_byte_array(bytes([10, 255]))
        'new byte[] { 0x0A, 0xFF }'
        >>> format_byte_array(b"")
        'new byte[0]'
    """
    if not data:
        return "new byte[0]"
    return "new byte[] { " + ", ".join(f"0x{b:02X}" for b in data) + " }"


def _format_float(value: float) -> str:
    text = repr(float(value))
    if text in ("inf", "-inf", "nan"):
        # No C# literal for these; fall back to the named constants
        return {"inf": "double.PositiveInfinity", "-inf": "double.NegativeInfinity"}.get(
            text, "double.NaN"
        )
    return text


def _offset_parts(offset: timedelta) -> tuple[int, int]:
    total_minutes = int(offset.total_seconds()) // 60
    sign = -1 if total_minutes < 0 else 1
    hours, minutes = divmod(abs(total_minutes), 60)
    return sign * hours, sign * minutes


def _timespan_parts(span: timedelta) -> tuple[int, int, int, int]:
    total = int(span.total_seconds())
    sign = -1 if total < 0 else 1
    days, rest = divmod(abs(total), 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return sign * days, sign * hours, sign * minutes, sign * seconds


def format_literal(value: Any, type_name: Optional[str] = None) -> str:
    """
    Convert a typed value into C# literal text.

    The Python type of the value decides the form; ``type_name`` picks
    between spellings that share a Python type (``Single`` vs ``Double``,
    ``Char`` vs ``String``).

    Args:
        value: Generated value
        type_name: Declared property type (any spelling)

    Returns:
        Literal text

    Examples:
        >>> format_literal(None)
        'null'
        >>> format_literal(Decimal("12.50"), "Decimal")
        '12.50m'
        >>> format_literal(1.5, "float")
        '1.5f'
        >>> format_literal(datetime(2024, 1, 2, 3, 4, 5))
        'new DateTime(2024, 1, 2, 3, 4, 5)'
    """
    canonical = normalize_type_name(type_name) if type_name else ""

    if value is None:
        return NULL_LITERAL
    if isinstance(value, RawLiteral):
        return value.text
    if isinstance(value, EnumValue):
        return " | ".join(f"{value.type_name}.{member}" for member in value.members)
    # bool is a subclass of int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        return f"{value:f}m"
    if isinstance(value, float):
        suffix = "f" if canonical == "Single" else "d"
        return f"{_format_float(value)}{suffix}"
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            hours, minutes = _offset_parts(value.utcoffset() or timedelta(0))
            return (
                f"new DateTimeOffset({value.year}, {value.month}, {value.day}, "
                f"{value.hour}, {value.minute}, {value.second}, "
                f"new TimeSpan({hours}, {minutes}, 0))"
            )
        return (
            f"new DateTime({value.year}, {value.month}, {value.day}, "
            f"{value.hour}, {value.minute}, {value.second})"
        )
    if isinstance(value, timedelta):
        days, hours, minutes, seconds = _timespan_parts(value)
        return f"new TimeSpan({days}, {hours}, {minutes}, {seconds})"
    if isinstance(value, uuid.UUID):
        return f'new Guid("{value}")'
    if isinstance(value, (bytes, bytearray)):
        return format_byte_array(bytes(value))
    if isinstance(value, str):
        if canonical == "Char" and len(value) == 1:
            return "'" + escape_string(value, quote="'") + "'"
        return f'"{escape_string(value)}"'
    return str(value)


def parse_literal(text: str, type_name: str) -> Any:
    """
    Parse C# literal text produced by ``format_literal`` back into a value.

    Args:
        text: Literal text
        type_name: Declared property type (any spelling)

    Returns:
        Typed value. Text that does not match the type's literal form comes
        back as ``RawLiteral``.

    Example:
        >>> parse_literal('new Guid("00000000-0000-0000-0000-000000000001")', "Guid")
        UUID('00000000-0000-0000-0000-000000000001')
    """
    text = text.strip()
    if text == NULL_LITERAL:
        return None

    canonical = normalize_type_name(type_name)

    if canonical == "String" and len(text) >= 2 and text[0] == text[-1] == '"':
        return unescape_string(text[1:-1])
    if canonical == "Char" and len(text) >= 3 and text[0] == text[-1] == "'":
        return unescape_string(text[1:-1])
    if canonical == "Boolean" and text in ("true", "false"):
        return text == "true"
    if canonical in ("Int32", "Int64", "Int16", "Byte") and re.fullmatch(r"-?\d+", text):
        return int(text)
    if canonical == "Decimal" and text.endswith("m"):
        return Decimal(text[:-1])
    if canonical in ("Double", "Single") and text[-1:] in ("d", "f"):
        return float(text[:-1])
    if canonical == "Guid":
        match = _GUID_RE.match(text)
        if match:
            return uuid.UUID(match.group(1))
    if canonical == "DateTime":
        match = _DATETIME_RE.match(text)
        if match:
            return datetime(*(int(part) for part in match.groups()))
    if canonical == "DateTimeOffset":
        match = _DATETIMEOFFSET_RE.match(text)
        if match:
            parts = [int(part) for part in match.groups()]
            offset = timedelta(hours=parts[6], minutes=parts[7])
            return datetime(*parts[:6], tzinfo=timezone(offset))
    if canonical == "TimeSpan":
        match = _TIMESPAN_RE.match(text)
        if match:
            days, hours, minutes, seconds = (int(part) for part in match.groups())
            return timedelta(days=days, hours=hours, minutes=minutes, seconds=seconds)
    if canonical == "Byte[]":
        if text == "new byte[0]":
            return b""
        if text.startswith("new byte[]"):
            return bytes(int(h, 16) for h in _BYTE_RE.findall(text))
    if canonical not in _BUILTIN_TYPES and text.startswith(f"{canonical}."):
        members = tuple(part.strip()[len(canonical) + 1 :] for part in text.split("|"))
        return EnumValue(canonical, members)

    return RawLiteral(text)
