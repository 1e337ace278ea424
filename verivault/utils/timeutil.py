"""
Timestamp helpers
API timestamps are ISO-8601 UTC with millisecond precision and a Z suffix.
"""
import time
from datetime import datetime, timezone
from typing import Optional

BASE36_DIGITS = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ'


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Format a datetime the way the API exposes it (2024-01-31T08:15:00.123Z)"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def now_iso() -> str:
    return to_iso(utc_now())


def now_millis() -> int:
    return int(time.time() * 1000)


def today_str() -> str:
    """Current UTC date as YYYY-MM-DD"""
    return utc_now().strftime('%Y-%m-%d')


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse an API timestamp or date string, returning None when it cannot be read"""
    if not value:
        return None
    text = str(value).strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_base36(number: int) -> str:
    """Upper-case base36 rendering of a non-negative integer"""
    if number < 0:
        raise ValueError('number must be non-negative')
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_DIGITS[remainder])
    return ''.join(reversed(digits))
