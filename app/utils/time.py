from __future__ import annotations

from datetime import datetime, timedelta, timezone


UTC = timezone.utc


def utcnow() -> datetime:
    """
    Returns timezone-aware current UTC time.
    """
    return datetime.now(UTC)


def ensure_aware(dt: datetime, assume_utc: bool = True) -> datetime:
    """
    Ensure a datetime is timezone-aware. If naive and assume_utc is True,
    interpret as UTC; otherwise raise ValueError.
    """
    if dt.tzinfo is not None:
        return dt.astimezone(UTC)
    if assume_utc:
        return dt.replace(tzinfo=UTC)
    raise ValueError("Naive datetime provided and assume_utc=False")


def days_before(dt: datetime, days: int) -> datetime:
    """
    Subtract whole days from a (aware or naive) datetime and return a UTC-aware datetime.
    """
    if days < 0:
        raise ValueError("days must be non-negative")
    return ensure_aware(dt) - timedelta(days=days)


def format_day(dt: datetime) -> str:
    """
    Day-first date like '19/10/2026'.
    """
    return ensure_aware(dt).strftime("%d/%m/%Y")
