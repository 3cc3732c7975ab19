"""Allowed attendance status changes, keyed by the event that causes them.

Automated writers (weekend cascade, leave reconciliation, holiday backfill)
never decide a new status inline; they ask :func:`apply_transition`.
"""

from __future__ import annotations

import datetime as dt
from enum import StrEnum

from attendance_payroll.attendance.calendar import is_weekend
from attendance_payroll.attendance.models import AttendanceRecord

Status = AttendanceRecord.Status


class Event(StrEnum):
    CASCADE_ABSENT = "cascade_absent"
    LEAVE_APPROVED = "leave_approved"
    LEAVE_REVOKED = "leave_revoked"
    HOLIDAY_DECLARED = "holiday_declared"


# Cascaded absence wins over a default weekly-off classification but never
# overwrites LEAVE, HOLIDAY or a real absence.
_CASCADE_ABSENT = {
    Status.WEEKEND.value: Status.ABSENT,
    Status.PRESENT.value: Status.ABSENT,
}

_HOLIDAY_DECLARED = {
    Status.ABSENT.value: Status.HOLIDAY,
}


def _leave_revoked(current: str, day: dt.date) -> str | None:
    if current != Status.LEAVE:
        return None
    return Status.WEEKEND if is_weekend(day) else Status.ABSENT


def apply_transition(current: str | None, event: Event, day: dt.date) -> str | None:
    """Return the status ``event`` moves ``current`` to, or ``None`` for no write.

    ``current`` is ``None`` when no record exists yet for ``day``; the result
    is then the status a freshly created record should carry.
    """
    if event == Event.LEAVE_APPROVED:
        return None if current == Status.LEAVE else Status.LEAVE
    if event == Event.CASCADE_ABSENT:
        if current is None:
            return Status.ABSENT
        return _CASCADE_ABSENT.get(current)
    if event == Event.LEAVE_REVOKED:
        if current is None:
            return None
        return _leave_revoked(current, day)
    if event == Event.HOLIDAY_DECLARED:
        if current is None:
            return None
        return _HOLIDAY_DECLARED.get(current)
    msg = f"Unknown attendance event: {event!r}"
    raise ValueError(msg)
