"""Date helpers."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

import pendulum


def utcnow() -> datetime:
    """Current time in UTC."""
    return pendulum.now("UTC")


def parse_datetime(raw: Optional[str]) -> Optional[datetime]:
    """
    Parse RFC 2822 (``Mon, 01 Jan 2024 10:00:00 GMT``) or ISO 8601 text.

    Returns:
        Aware UTC datetime, or None when the value is empty or unparsable
    """
    value = (raw or "").strip()
    if not value:
        return None

    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        parsed = None

    if parsed is None:
        try:
            parsed = pendulum.parse(value, strict=False)
        except (ValueError, TypeError):
            return None

    if not isinstance(parsed, datetime):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def normalize_publish_date(raw: Optional[str], now: Optional[datetime] = None) -> datetime:
    """Parse a feed-supplied date; anything unusable becomes ``now``."""
    return parse_datetime(raw) or now or utcnow()
