"""Backfill for holidays declared after the day was already marked ABSENT."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field

from django.db import transaction

from attendance_payroll.audit.models import AuditLog
from attendance_payroll.audit.utils import log_action
from attendance_payroll.leaves.models import Holiday

from .calendar import DayLike
from .calendar import day_range
from .calendar import normalize_day
from .models import AttendanceRecord
from .transitions import Event
from .transitions import apply_transition

logger = logging.getLogger(__name__)


@dataclass
class HolidayFix:
    holiday: str
    date: str
    employees_fixed: list[dict] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.employees_fixed)

    def to_payload(self) -> dict:
        return {
            "holiday": self.holiday,
            "date": self.date,
            "employeesFixed": self.employees_fixed,
            "count": self.count,
        }


@dataclass
class HolidayFixResult:
    details: list[HolidayFix] = field(default_factory=list)

    @property
    def total_fixed(self) -> int:
        return sum(item.count for item in self.details)

    def to_payload(self) -> dict:
        return {
            "success": True,
            "totalFixed": self.total_fixed,
            "details": [item.to_payload() for item in self.details],
        }


def _holidays_between(start: DayLike | None, end: DayLike | None):
    holidays = Holiday.objects.order_by("date")
    if start is not None and end is not None:
        first, last = day_range(start, end)
        return holidays.filter(date__gte=first, date__lte=last)
    if start is not None:
        holidays = holidays.filter(date__gte=normalize_day(start))
    if end is not None:
        holidays = holidays.filter(date__lte=normalize_day(end))
    return holidays


@transaction.atomic
def fix_holiday_attendance(
    start: DayLike | None = None,
    end: DayLike | None = None,
    *,
    actor=None,
    ip_address: str = "",
) -> HolidayFixResult:
    """Rewrite ABSENT records that fall on a declared holiday to HOLIDAY.

    With no bounds every holiday is checked.
    """
    result = HolidayFixResult()
    for holiday in _holidays_between(start, end):
        records = (
            AttendanceRecord.objects.select_for_update()
            .select_related("employee")
            .filter(date=holiday.date, status=AttendanceRecord.Status.ABSENT)
            .order_by("employee_id")
        )
        fix = HolidayFix(holiday=holiday.name, date=holiday.date.isoformat())
        for record in records:
            new_status = apply_transition(
                record.status,
                Event.HOLIDAY_DECLARED,
                record.date,
            )
            if new_status is None:
                continue
            record.status = new_status
            record.save(update_fields=["status", "updated_at"])
            employee = record.employee
            fix.employees_fixed.append(
                {"name": employee.name, "employeeId": employee.employee_id},
            )
        if fix.employees_fixed:
            result.details.append(fix)

    if result.total_fixed:
        logger.info("Holiday fix rewrote %d attendance records", result.total_fixed)
        log_action(
            AuditLog.Action.HOLIDAY_FIX,
            actor=actor,
            message=f"Fixed {result.total_fixed} holiday attendance records",
            model_name="attendance.AttendanceRecord",
            after=result.to_payload(),
            ip_address=ip_address,
        )
    return result
