"""Structured (JSON) record output."""

import base64
import json
import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from relseed.formatters.base import RecordFormatter
from relseed.models import EnumValue, GenerationResult, RawLiteral


def to_plain_value(value: Any) -> Any:
    """
    Convert a typed record value into a JSON-compatible value.

    - Decimal -> string (exact)
    - datetime -> ISO 8601 string (with offset when aware)
    - timedelta -> total seconds
    - UUID -> canonical string
    - bytes -> base64 string
    - EnumValue -> member name, or list of names for combined flags
    - RawLiteral -> its text

    Examples:
        >>> to_plain_value(Decimal("9.99"))
        '9.99'
        >>> to_plain_value(EnumValue("Color", ("Red", "Blue")))
        ['Red', 'Blue']
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, EnumValue):
        if len(value.members) == 1:
            return value.members[0]
        return list(value.members)
    if isinstance(value, RawLiteral):
        return value.text
    return str(value)


class JsonRecordFormatter(RecordFormatter):
    """
    Render records as one JSON document.

    Layout::

        {
          "order": ["Author", "Book"],
          "entities": {"Author": [{"Id": 1, ...}], ...},
          "placeholders": {"Review": "Parent entity ..."},
          "diagnostics": [{"kind": "...", "entity": "...", "message": "..."}]
        }
    """

    def __init__(self, indent: int = 2):
        self.indent = indent

    def to_document(self, result: GenerationResult) -> dict[str, Any]:
        """Build the JSON-compatible document for a result."""
        entities: dict[str, list[dict[str, Any]]] = {}
        placeholders: dict[str, str] = {}
        for block in result.blocks:
            if block.is_placeholder:
                placeholders[block.entity_name] = block.placeholder or ""
                continue
            entities[block.entity_name] = [
                {name: to_plain_value(value) for name, value in record.values.items()}
                for record in block.records
            ]

        return {
            "order": list(result.order),
            "entities": entities,
            "placeholders": placeholders,
            "diagnostics": [
                {"kind": d.kind, "entity": d.entity_name, "message": d.message}
                for d in result.diagnostics
            ],
        }

    def render(self, result: GenerationResult) -> str:
        """Render a generation result as JSON text."""
        return json.dumps(self.to_document(result), indent=self.indent, ensure_ascii=False)
