"""Session payload serialization.

The backing table has no schema, so richer Python types cannot be told apart
from strings on the way back. Every value that is not plain JSON is written
as its canonical string form and read back as that string: dates and times
as ISO-8601, enums as their value, anything else (UUID, Path, ...) via str().
"""

import json
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from dynamo_sessions.db.errors import ValidationError
from dynamo_sessions.sessions.models import SessionData

# Scalars stored as they are
_PLAIN_TYPES = (str, int, float, bool, Decimal, type(None))


def deep_replace_dates_with_iso_strings(obj: Any) -> Any:
    """Return a copy of `obj` holding only JSON-compatible values.

    Dicts, lists, tuples and sets are walked recursively into new containers
    (tuples and sets become lists). Dates, times and datetimes become ISO
    strings, enums their (normalized) value, and any other non-JSON object
    its str() form. Strings, numbers, booleans and None pass through.
    """
    if isinstance(obj, Enum):
        return deep_replace_dates_with_iso_strings(obj.value)
    if isinstance(obj, _PLAIN_TYPES):
        return obj
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {key: deep_replace_dates_with_iso_strings(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [deep_replace_dates_with_iso_strings(item) for item in obj]
    return str(obj)


def normalize_payload(session: SessionData) -> dict[str, Any]:
    """Flatten a session into its storable mapping."""
    payload: dict[str, Any] = deep_replace_dates_with_iso_strings(session.to_payload())
    return payload


def decode_payload(raw: Any) -> dict[str, Any]:
    """Decode the stored `sess` attribute into a mapping.

    Rows written by connect-dynamodb hold the session as a JSON string;
    those are parsed so old sessions keep working after a migration.

    Raises:
        ValidationError: If a string payload is not a JSON object
    """
    if isinstance(raw, dict):
        return raw

    if isinstance(raw, (str, bytes)):
        try:
            decoded = json.loads(raw)
        except ValueError as e:  # JSONDecodeError, UnicodeDecodeError
            raise ValidationError(f"Malformed legacy session payload: {e}", cause=e) from e
        if not isinstance(decoded, dict):
            raise ValidationError(
                f"Legacy session payload is {type(decoded).__name__}, expected an object"
            )
        return decoded

    raise ValidationError(f"Unsupported session payload type: {type(raw).__name__}")
