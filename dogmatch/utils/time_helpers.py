from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value):
    """Render Firestore timestamps (datetime subclasses) as ISO-8601 strings."""
    if isinstance(value, datetime):
        return value.isoformat()
    return value
