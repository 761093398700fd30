"""Small helpers shared across the package."""

import secrets
from datetime import datetime, timezone


def generate_id() -> str:
    """Generate a short unique identifier (24 hex characters)."""
    return secrets.token_hex(12)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
