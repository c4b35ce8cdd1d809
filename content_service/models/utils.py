"""
Utility helpers shared by the content models.

Identifier handling and human-readable date formatting used across the
store, the recommendation engine and the HTTP layer.
"""

from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from bson import ObjectId


def new_object_id() -> str:
    """Generate a new identifier in the store's identifier format."""
    return str(ObjectId())


def is_valid_object_id(value: Any) -> bool:
    """Check whether a value is a well-formed store identifier.

    Only 24-character hex strings (or ObjectId instances) are accepted;
    12-byte strings that bson would otherwise tolerate are rejected.
    """
    if isinstance(value, ObjectId):
        return True
    if not isinstance(value, str) or len(value) != 24:
        return False
    return ObjectId.is_valid(value)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_aware(dt: datetime) -> datetime:
    """Treat naive datetimes (as returned by pymongo) as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def unique_strings(values: Optional[Iterable[Any]]) -> List[str]:
    """Normalize a topic collection: strings only, stripped, first occurrence kept."""
    result: List[str] = []
    seen = set()
    for value in values or []:
        if not isinstance(value, str):
            continue
        clean = value.strip()
        if not clean or clean in seen:
            continue
        seen.add(clean)
        result.append(clean)
    return result


def format_long_date(dt: datetime) -> str:
    """Format a timestamp as e.g. 'January 5, 2025'."""
    dt = ensure_aware(dt)
    return f"{dt:%B} {dt.day}, {dt.year}"


def format_long_datetime(dt: datetime) -> str:
    """Format a timestamp as e.g. 'January 5, 2025 at 03:04 PM'."""
    dt = ensure_aware(dt)
    return f"{format_long_date(dt)} at {dt:%I:%M %p}"
