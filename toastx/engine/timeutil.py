"""
toastx.engine.timeutil — Id Generation & Calendar Helpers
===========================================================

Pure helpers shared by the engine and the store.  Every calendar question
is answered in UTC, and every helper accepts an injected ``now`` so tests
can pin the clock.
"""

from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_ts(value: datetime | str) -> datetime:
    """Coerce a datetime or ISO-8601 string to an aware UTC datetime.

    Naive values are assumed to already be UTC.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# ---------------------------------------------------------------------------
# Ids
# ---------------------------------------------------------------------------
def generate_id(prefix: str = "toast-x", *, now: datetime | None = None) -> str:
    """Return ``"{prefix}-{base36 ms timestamp}-{9 random base36 chars}"``."""
    now = now or utcnow()
    stamp = _to_base36(int(now.timestamp() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{prefix}-{stamp}-{suffix}"


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------
def today_string(now: datetime | None = None) -> str:
    """Today's UTC date as ``YYYY-MM-DD``."""
    return parse_ts(now or utcnow()).strftime("%Y-%m-%d")


def month_string(now: datetime | None = None) -> str:
    """The current UTC month as ``YYYY-MM``."""
    return parse_ts(now or utcnow()).strftime("%Y-%m")


def is_today(value: datetime | str | None, now: datetime | None = None) -> bool:
    """True when *value* falls on the same UTC calendar day as *now*.

    Accepts a datetime, a full ISO timestamp, or a bare ``YYYY-MM-DD``.
    Empty values are never today.
    """
    if not value:
        return False
    return parse_ts(value).date() == parse_ts(now or utcnow()).date()


def hours_since(value: datetime | str, now: datetime | None = None) -> float:
    delta = parse_ts(now or utcnow()) - parse_ts(value)
    return delta.total_seconds() / 3600


def start_of_day(now: datetime | None = None) -> datetime:
    return parse_ts(now or utcnow()).replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(now: datetime | None = None) -> datetime:
    """Monday 00:00 UTC of the current week."""
    day = start_of_day(now)
    return day - timedelta(days=day.weekday())


def start_of_month(now: datetime | None = None) -> datetime:
    return start_of_day(now).replace(day=1)


def start_of_quarter(now: datetime | None = None) -> datetime:
    day = start_of_day(now)
    first_month = (day.month - 1) // 3 * 3 + 1
    return day.replace(month=first_month, day=1)


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------
def format_relative_time(value: datetime | str, now: datetime | None = None) -> str:
    """Human label for *value*: ``Just now``, ``5m ago``, ``3h ago``,
    ``Yesterday``, ``4d ago``, then ``Mar 5`` (or ``Mar 5, 2023`` when the
    year differs).
    """
    ts = parse_ts(value)
    now = parse_ts(now or utcnow())
    seconds = (now - ts).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days}d ago"

    label = f"{ts.strftime('%b')} {ts.day}"
    if ts.year != now.year:
        label += f", {ts.year}"
    return label
