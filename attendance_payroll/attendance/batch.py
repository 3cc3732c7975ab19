"""Daily attendance auto-marking.

For a target day (yesterday by default) every active employee ends up with
exactly one attendance record:

* weekend days become PRESENT (a paid weekly off),
* declared holidays become HOLIDAY,
* any other day without a record becomes ABSENT, and an ABSENT Friday or
  Monday cascades onto the adjacent weekend day.

Existing records are never overwritten, so a run can be repeated or resumed
for the same day. Each employee is processed in its own savepoint; a failure
is recorded in the result and the run moves on to the next employee.
"""

from __future__ import annotations

import datetime as dt
import logging
import time
from dataclasses import dataclass
from dataclasses import field

from django.conf import settings
from django.db import DatabaseError
from django.db import IntegrityError
from django.db import transaction
from django.utils import timezone

from attendance_payroll.audit.models import AuditLog
from attendance_payroll.audit.utils import log_action
from attendance_payroll.employees.models import Employee

from .calendar import DayLike
from .calendar import get_holiday
from .calendar import is_friday
from .calendar import is_monday
from .calendar import is_weekend
from .calendar import iter_days
from .calendar import normalize_day
from .cascade import process_weekend_cascade
from .models import AttendanceRecord

logger = logging.getLogger(__name__)

Status = AttendanceRecord.Status

RUN_FAILED_MESSAGE = "Failed to process daily attendance"


@dataclass(frozen=True)
class EmployeeError:
    employee_id: str
    name: str
    error: str

    def to_payload(self) -> dict:
        return {"employeeId": self.employee_id, "name": self.name, "error": self.error}


@dataclass
class DailyAttendanceResult:
    date: dt.date
    success: bool = True
    is_weekend: bool = False
    is_holiday: bool = False
    holiday_name: str | None = None
    total_employees: int = 0
    weekends_marked: int = 0
    holidays_marked: int = 0
    absents_marked: int = 0
    cascaded_absents: int = 0
    already_exists: int = 0
    not_yet_joined: int = 0
    timed_out: bool = False
    errors: list[EmployeeError] = field(default_factory=list)
    error: str | None = None
    details: str | None = None

    def counters(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "weekendsMarked": self.weekends_marked,
            "holidaysMarked": self.holidays_marked,
            "absentsMarked": self.absents_marked,
            "cascadedAbsents": self.cascaded_absents,
            "alreadyExists": self.already_exists,
            "errors": [err.to_payload() for err in self.errors],
        }

    def to_payload(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error, "details": self.details}
        return {
            "success": True,
            "isWeekend": self.is_weekend,
            "isHoliday": self.is_holiday,
            "holidayName": self.holiday_name,
            "totalEmployees": self.total_employees,
            "timedOut": self.timed_out,
            "results": self.counters(),
        }


def default_target_date(now: dt.datetime | None = None) -> dt.date:
    """The day before ``now`` in the active time zone."""
    return normalize_day(now or timezone.now()) - dt.timedelta(days=1)


def _classify(day: dt.date, holiday) -> str:
    if is_weekend(day):
        return Status.PRESENT
    if holiday is not None:
        return Status.HOLIDAY
    return Status.ABSENT


def _mark_employee(employee: Employee, day: dt.date, status: str) -> tuple[str, int]:
    """Create the day's record for one employee.

    Returns ``(outcome, cascaded)`` where outcome is ``"exists"`` or the
    status written.
    """
    with transaction.atomic():
        if AttendanceRecord.objects.filter(employee=employee, date=day).exists():
            return "exists", 0
        try:
            with transaction.atomic():
                AttendanceRecord.objects.create(
                    employee=employee,
                    date=day,
                    status=status,
                    punch_in=None,
                    punch_out=None,
                    total_hours=0,
                    break_duration=0,
                    idle_time=0,
                )
        except IntegrityError:
            # A concurrent trigger created it between the check and the insert.
            return "exists", 0

        cascaded = 0
        if status == Status.ABSENT and (is_friday(day) or is_monday(day)):
            cascaded = len(process_weekend_cascade(employee.pk, day))
        return status, cascaded


def _tally(result: DailyAttendanceResult, outcome: str, cascaded: int) -> None:
    if outcome == "exists":
        result.already_exists += 1
    elif outcome == Status.PRESENT:
        result.weekends_marked += 1
    elif outcome == Status.HOLIDAY:
        result.holidays_marked += 1
    else:
        result.absents_marked += 1
        result.cascaded_absents += cascaded


def run_daily_attendance(
    target_date: DayLike | None = None,
    *,
    now: dt.datetime | None = None,
    time_budget_seconds: float | None = None,
    actor=None,
) -> DailyAttendanceResult:
    """Auto-mark attendance for every active employee on one day."""
    day = (
        normalize_day(target_date)
        if target_date is not None
        else default_target_date(now)
    )
    if time_budget_seconds is None:
        time_budget_seconds = getattr(
            settings,
            "ATTENDANCE_BATCH_TIME_BUDGET_SECONDS",
            0,
        )
    result = DailyAttendanceResult(date=day, is_weekend=is_weekend(day))

    try:
        holiday = get_holiday(day)
        employees = list(Employee.objects.filter(is_active=True).order_by("pk"))
    except DatabaseError as exc:
        logger.exception("Daily attendance for %s aborted before processing", day)
        result.success = False
        result.error = RUN_FAILED_MESSAGE
        result.details = str(exc)
        return result

    result.is_holiday = holiday is not None
    result.holiday_name = holiday.name if holiday is not None else None
    result.total_employees = len(employees)
    status = _classify(day, holiday)

    started = time.monotonic()
    for employee in employees:
        if time_budget_seconds and time.monotonic() - started >= time_budget_seconds:
            result.timed_out = True
            logger.warning(
                "Daily attendance for %s stopped after %ss budget",
                day,
                time_budget_seconds,
            )
            break
        if not employee.joined_by(day):
            result.not_yet_joined += 1
            continue
        try:
            outcome, cascaded = _mark_employee(employee, day, status)
        except Exception as exc:  # noqa: BLE001 - one employee must not abort the run
            logger.warning(
                "Daily attendance for %s failed for employee %s: %s",
                day,
                employee.employee_id,
                exc,
            )
            result.errors.append(
                EmployeeError(
                    employee_id=employee.employee_id,
                    name=employee.name,
                    error=str(exc) or exc.__class__.__name__,
                ),
            )
            continue
        _tally(result, outcome, cascaded)

    logger.info(
        "Daily attendance %s: weekends=%d holidays=%d absents=%d cascaded=%d "
        "existing=%d errors=%d timed_out=%s",
        day,
        result.weekends_marked,
        result.holidays_marked,
        result.absents_marked,
        result.cascaded_absents,
        result.already_exists,
        len(result.errors),
        result.timed_out,
    )
    log_action(
        AuditLog.Action.DAILY_ATTENDANCE_RUN,
        actor=actor,
        message=f"Daily attendance run for {day.isoformat()}",
        model_name="attendance.AttendanceRecord",
        after=result.to_payload(),
    )
    return result


def run_daily_attendance_range(
    start: DayLike,
    end: DayLike,
    *,
    actor=None,
    time_budget_seconds: float | None = None,
) -> list[DailyAttendanceResult]:
    """Backfill consecutive days, one independent run per day."""
    return [
        run_daily_attendance(
            day,
            actor=actor,
            time_budget_seconds=time_budget_seconds,
        )
        for day in iter_days(start, end)
    ]
