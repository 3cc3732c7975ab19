"""Calendar-day classification for attendance.

Every attendance key and query goes through :func:`normalize_day`, so a
calendar day means the same thing whether it arrives as a ``date``, an aware
``datetime`` or an ISO string.
"""

from __future__ import annotations

import datetime as dt
from calendar import monthrange
from collections.abc import Iterable
from collections.abc import Iterator

from django.utils import timezone
from django.utils.dateparse import parse_date
from django.utils.dateparse import parse_datetime

from attendance_payroll.exceptions import ValidationError
from attendance_payroll.leaves.models import Holiday

MONDAY = 0
FRIDAY = 4
SATURDAY = 5
SUNDAY = 6
WEEKEND_DAYS = (SATURDAY, SUNDAY)

DayLike = dt.date | dt.datetime | str


def normalize_day(value: DayLike) -> dt.date:
    """Return the calendar day ``value`` falls on in the active time zone."""
    if isinstance(value, dt.datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = parse_date(text)
            if parsed is not None:
                return parsed
            parsed_dt = parse_datetime(text)
        except ValueError:
            parsed_dt = None
        if parsed_dt is not None:
            return normalize_day(parsed_dt)
    msg = f"Invalid calendar day: {value!r}"
    raise ValidationError(msg)


def is_weekend(day: DayLike) -> bool:
    return normalize_day(day).weekday() in WEEKEND_DAYS


def is_friday(day: DayLike) -> bool:
    return normalize_day(day).weekday() == FRIDAY


def is_monday(day: DayLike) -> bool:
    return normalize_day(day).weekday() == MONDAY


def is_saturday(day: DayLike) -> bool:
    return normalize_day(day).weekday() == SATURDAY


def is_sunday(day: DayLike) -> bool:
    return normalize_day(day).weekday() == SUNDAY


def next_day(day: DayLike) -> dt.date:
    return normalize_day(day) + dt.timedelta(days=1)


def previous_day(day: DayLike) -> dt.date:
    return normalize_day(day) - dt.timedelta(days=1)


def get_holiday(day: DayLike) -> Holiday | None:
    """Holiday declared on ``day``; database errors propagate to the caller."""
    return Holiday.objects.filter(date=normalize_day(day)).first()


def is_holiday(day: DayLike) -> bool:
    return get_holiday(day) is not None


def day_range(start: DayLike, end: DayLike) -> tuple[dt.date, dt.date]:
    """Normalized ``(first, last)`` bounds; ``end`` before ``start`` is rejected."""
    first = normalize_day(start)
    last = normalize_day(end)
    if last < first:
        msg = f"End date {last.isoformat()} is before start date {first.isoformat()}"
        raise ValidationError(msg)
    return first, last


def iter_days(start: DayLike, end: DayLike) -> Iterator[dt.date]:
    """Every calendar day from ``start`` to ``end`` inclusive.

    The range is validated eagerly, before the first day is produced.
    """
    first, last = day_range(start, end)
    return _walk(first, last)


def _walk(first: dt.date, last: dt.date) -> Iterator[dt.date]:
    current = first
    while current <= last:
        yield current
        current += dt.timedelta(days=1)


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:  # noqa: PLR2004
        msg = f"Invalid month: {month}"
        raise ValidationError(msg)
    return monthrange(year, month)[1]


def weekend_days_in_month(
    year: int,
    month: int,
    weekly_off: Iterable[int] = WEEKEND_DAYS,
) -> int:
    off = set(weekly_off)
    total = days_in_month(year, month)
    return sum(
        1 for day in range(1, total + 1) if dt.date(year, month, day).weekday() in off
    )
