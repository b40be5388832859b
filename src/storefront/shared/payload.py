"""JSON-encoded command fields.

Commands carry nested structures (order lines, size stocks) as JSON text,
which survives the event store and the broker unchanged.
"""

import json

from protean.exceptions import ValidationError


def encode(value) -> str | None:
    return None if value is None else json.dumps(value)


def decode(value, field: str):
    """Decode a JSON command field; structures already decoded pass through."""
    if value is None or not isinstance(value, str | bytes):
        return value
    try:
        return json.loads(value)
    except ValueError:
        raise ValidationError({field: ["Must be valid JSON"]}) from None
