"""
Date, time and hour helpers shared by the time-entry and timesheet engines.

Weeks start on Sunday. Timestamps are stored as naive UTC datetimes and a
time entry's calendar date is the UTC date of its clock-in.
"""

import unicodedata
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict

# Order matters: index == days since Sunday
WEEKDAYS = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

HOURS_QUANTUM = Decimal("0.01")
ZERO_HOURS = Decimal("0.00")

# Largest value a Numeric(6, 2) day column holds
MAX_DAY_HOURS = Decimal("9999.99")


def utcnow() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def day_index(day: date) -> int:
    """
    Day-of-week index with Sunday as 0.

    Examples:
        2024-01-07 (Sunday) -> 0
        2024-01-10 (Wednesday) -> 3
    """
    # date.weekday() has Monday == 0
    return (day.weekday() + 1) % 7


def weekday_name(day: date) -> str:
    """Name of the timesheet column a date falls into."""
    return WEEKDAYS[day_index(day)]


def week_start_for(day: date) -> date:
    """
    Sunday that begins the week containing ``day``.

    A Sunday maps to itself; a Wednesday maps to the Sunday three days before.
    """
    if isinstance(day, datetime):
        day = day.date()
    return day - timedelta(days=day_index(day))


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two timestamps, dropping any partial minute."""
    seconds = (end - start).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // 60)


def to_hours(value) -> Decimal:
    """Coerce a number to a two-place Decimal hour value."""
    if value is None:
        return ZERO_HOURS
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)


def minutes_to_hours(minutes: int) -> Decimal:
    """Convert minutes to hours (real division), rounded to two places."""
    return to_hours(Decimal(minutes) / Decimal(60))


def added_hours(synced_minutes: int, new_minutes: int) -> Decimal:
    """
    Hours to add to a day that already holds ``synced_minutes`` of clock time.

    The running minute total is rounded, not each batch, so the day ends up
    at the same value however the minutes were split across syncs:
    three 20-minute syncs add 0.33, 0.34 and 0.33.
    """
    return minutes_to_hours(synced_minutes + new_minutes) - minutes_to_hours(synced_minutes)


def sum_hours(hours: Dict[str, Decimal]) -> Decimal:
    """Total of the seven day columns of a weekly hours mapping."""
    return sum((to_hours(hours.get(day)) for day in WEEKDAYS), ZERO_HOURS)


def normalize_username(username: str) -> str:
    """
    Normalize username by:
    1. Removing accents/diacritics (é -> e, ñ -> n, ü -> u)
    2. Removing spaces
    3. Converting to lowercase

    Examples:
        "John Doe" -> "johndoe"
        "José García" -> "josegarcia"
    """
    if not username:
        return ""

    # NFD separates base characters from combining diacritical marks
    normalized = unicodedata.normalize('NFD', username)
    without_accents = ''.join(
        char for char in normalized
        if unicodedata.category(char) != 'Mn'
    )

    return without_accents.strip().replace(" ", "").lower()
