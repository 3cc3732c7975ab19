"""Weekend cascade: an absence on Friday or Monday spreads to the adjacent weekend day.

Friday ABSENT makes the following Saturday ABSENT; Monday ABSENT makes the
preceding Sunday ABSENT. The adjacent day is only ever rewritten from a
default WEEKEND/PRESENT classification; LEAVE and HOLIDAY days are kept.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass

from django.db import IntegrityError
from django.db import transaction

from attendance_payroll.attendance.calendar import DayLike
from attendance_payroll.attendance.calendar import day_range
from attendance_payroll.attendance.calendar import is_friday
from attendance_payroll.attendance.calendar import is_monday
from attendance_payroll.attendance.calendar import is_saturday
from attendance_payroll.attendance.calendar import is_sunday
from attendance_payroll.attendance.calendar import next_day
from attendance_payroll.attendance.calendar import normalize_day
from attendance_payroll.attendance.calendar import previous_day
from attendance_payroll.attendance.models import AttendanceRecord
from attendance_payroll.attendance.transitions import Event
from attendance_payroll.attendance.transitions import apply_transition

logger = logging.getLogger(__name__)

REASON_FRIDAY = "Friday was absent"
REASON_MONDAY = "Monday was absent"


@dataclass(frozen=True)
class CascadeStatus:
    is_cascaded: bool
    reason: str | None = None

    def to_payload(self) -> dict:
        return {"isCascaded": self.is_cascaded, "reason": self.reason}


@dataclass(frozen=True)
class CascadeAbsence:
    date: dt.date
    reason: str

    def to_payload(self) -> dict:
        return {"date": self.date.isoformat(), "reason": self.reason}


def cascade_target(absent_date: DayLike) -> dt.date | None:
    """Weekend day implied by an absence on ``absent_date``, if any."""
    day = normalize_day(absent_date)
    if is_friday(day):
        return next_day(day)
    if is_monday(day):
        return previous_day(day)
    return None


def process_weekend_cascade(
    employee_id: int,
    absent_date: DayLike,
) -> list[AttendanceRecord]:
    """Apply the cascade for one absence and return the records actually written.

    Idempotent: a target already ABSENT (or LEAVE/HOLIDAY/HALF_DAY) is left
    alone, so a second call returns an empty list.
    """
    target = cascade_target(absent_date)
    if target is None:
        return []

    with transaction.atomic():
        record = (
            AttendanceRecord.objects.select_for_update()
            .filter(employee_id=employee_id, date=target)
            .first()
        )
        if record is None:
            try:
                with transaction.atomic():
                    record = AttendanceRecord.objects.create(
                        employee_id=employee_id,
                        date=target,
                        status=AttendanceRecord.Status.ABSENT,
                        punch_in=None,
                        punch_out=None,
                        total_hours=0,
                        break_duration=0,
                        idle_time=0,
                    )
            except IntegrityError:
                # Another writer created the row first; cascade onto theirs.
                record = AttendanceRecord.objects.select_for_update().get(
                    employee_id=employee_id,
                    date=target,
                )
            else:
                logger.debug(
                    "Cascade created ABSENT for employee %s on %s",
                    employee_id,
                    target,
                )
                return [record]

        new_status = apply_transition(record.status, Event.CASCADE_ABSENT, target)
        if new_status is None:
            return []
        record.status = new_status
        record.save(update_fields=["status", "updated_at"])
        logger.debug(
            "Cascade rewrote employee %s on %s to %s",
            employee_id,
            target,
            new_status,
        )
        return [record]


def is_weekend_cascaded_absent(
    employee_id: int,
    weekend_date: DayLike,
) -> CascadeStatus:
    """Whether the absence on a Saturday/Sunday follows from Friday/Monday."""
    day = normalize_day(weekend_date)
    if is_saturday(day):
        source, reason = previous_day(day), REASON_FRIDAY
    elif is_sunday(day):
        source, reason = next_day(day), REASON_MONDAY
    else:
        return CascadeStatus(is_cascaded=False)

    absent = AttendanceRecord.objects.filter(
        employee_id=employee_id,
        date=source,
        status=AttendanceRecord.Status.ABSENT,
    ).exists()
    if absent:
        return CascadeStatus(is_cascaded=True, reason=reason)
    return CascadeStatus(is_cascaded=False)


def get_weekend_cascade_absences(
    employee_id: int,
    start: DayLike,
    end: DayLike,
) -> list[CascadeAbsence]:
    """Weekend absences implied by Friday/Monday absences within ``[start, end]``."""
    first, last = day_range(start, end)
    absences = AttendanceRecord.objects.filter(
        employee_id=employee_id,
        status=AttendanceRecord.Status.ABSENT,
        date__gte=first,
        date__lte=last,
    ).order_by("date")

    cascaded: list[CascadeAbsence] = []
    for absence in absences:
        if is_friday(absence.date):
            cascaded.append(CascadeAbsence(next_day(absence.date), REASON_FRIDAY))
        elif is_monday(absence.date):
            cascaded.append(CascadeAbsence(previous_day(absence.date), REASON_MONDAY))
    return cascaded
