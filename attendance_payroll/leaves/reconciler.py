"""Keeps attendance in step with leave approvals.

An approval marks every day of the leave as LEAVE. Withdrawing an approval
(rejection or cancellation) puts each LEAVE day back to WEEKEND or ABSENT.
The revert is a reconstruction: a worked day overwritten by an approval is
not restored to PRESENT.

Each operation runs in a single transaction, so a leave range is reconciled
for every day or for none.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field

from django.db import IntegrityError
from django.db import transaction

from attendance_payroll.attendance.calendar import DayLike
from attendance_payroll.attendance.calendar import day_range
from attendance_payroll.attendance.calendar import iter_days
from attendance_payroll.attendance.models import AttendanceRecord
from attendance_payroll.attendance.transitions import Event
from attendance_payroll.attendance.transitions import apply_transition
from attendance_payroll.leaves.models import Leave

logger = logging.getLogger(__name__)

REVOKING_STATUSES = frozenset({Leave.Status.REJECTED, Leave.Status.CANCELLED})


@dataclass
class LeaveMarkResult:
    updated: list[AttendanceRecord] = field(default_factory=list)
    created: list[AttendanceRecord] = field(default_factory=list)


@dataclass
class ReconciliationOutcome:
    action: str = "none"
    created: int = 0
    updated: int = 0
    reverted: int = 0

    def to_payload(self) -> dict:
        return {
            "action": self.action,
            "created": self.created,
            "updated": self.updated,
            "reverted": self.reverted,
        }


def _locked_records(employee_id, first, last, **filters):
    return {
        record.date: record
        for record in AttendanceRecord.objects.select_for_update().filter(
            employee_id=employee_id,
            date__gte=first,
            date__lte=last,
            **filters,
        )
    }


def _create_leave_day(employee_id, day) -> tuple[AttendanceRecord, bool]:
    try:
        with transaction.atomic():
            record = AttendanceRecord.objects.create(
                employee_id=employee_id,
                date=day,
                status=AttendanceRecord.Status.LEAVE,
                punch_in=None,
                punch_out=None,
                total_hours=0,
                break_duration=0,
                idle_time=0,
            )
    except IntegrityError:
        record = AttendanceRecord.objects.select_for_update().get(
            employee_id=employee_id,
            date=day,
        )
        return record, False
    return record, True


def mark_leave_attendance(
    employee_id: int,
    start: DayLike,
    end: DayLike,
) -> LeaveMarkResult:
    """Mark every day in ``[start, end]`` as LEAVE, creating missing records."""
    days = list(iter_days(start, end))
    result = LeaveMarkResult()
    with transaction.atomic():
        existing = _locked_records(employee_id, days[0], days[-1])
        for day in days:
            record = existing.get(day)
            if record is None:
                record, created = _create_leave_day(employee_id, day)
                if created:
                    result.created.append(record)
                    continue
            new_status = apply_transition(record.status, Event.LEAVE_APPROVED, day)
            if new_status is None:
                continue
            record.status = new_status
            record.save(update_fields=["status", "updated_at"])
            result.updated.append(record)

    logger.info(
        "Leave marked for employee %s %s..%s: %d created, %d updated",
        employee_id,
        days[0],
        days[-1],
        len(result.created),
        len(result.updated),
    )
    return result


def revert_leave_attendance(
    employee_id: int,
    start: DayLike,
    end: DayLike,
) -> list[AttendanceRecord]:
    """Put LEAVE days in ``[start, end]`` back to WEEKEND (Sat/Sun) or ABSENT."""
    first, last = day_range(start, end)
    reverted: list[AttendanceRecord] = []
    with transaction.atomic():
        records = _locked_records(
            employee_id,
            first,
            last,
            status=AttendanceRecord.Status.LEAVE,
        )
        for day in sorted(records):
            record = records[day]
            new_status = apply_transition(record.status, Event.LEAVE_REVOKED, day)
            if new_status is None:
                continue
            record.status = new_status
            record.save(update_fields=["status", "updated_at"])
            reverted.append(record)

    logger.info(
        "Leave reverted for employee %s %s..%s: %d records",
        employee_id,
        first,
        last,
        len(reverted),
    )
    return reverted


def handle_leave_status_change(  # noqa: PLR0913
    employee_id: int,
    start: DayLike,
    end: DayLike,
    new_status: str,
    previous_status: str | None,
    previous_start: DayLike | None = None,
    previous_end: DayLike | None = None,
) -> ReconciliationOutcome:
    """Reconcile attendance after a leave's status (or dates) changed.

    * becoming or staying APPROVED marks ``[start, end]``; when an approved
      leave moves to new dates the old range is reverted first.
    * APPROVED to REJECTED/CANCELLED reverts the previously approved range.
    * anything else writes nothing.
    """
    old_start = previous_start or start
    old_end = previous_end or end
    outcome = ReconciliationOutcome()

    with transaction.atomic():
        if new_status == Leave.Status.APPROVED:
            was_approved = previous_status == Leave.Status.APPROVED
            if was_approved and day_range(old_start, old_end) != day_range(start, end):
                outcome.reverted = len(
                    revert_leave_attendance(employee_id, old_start, old_end),
                )
            marked = mark_leave_attendance(employee_id, start, end)
            outcome.action = "marked"
            outcome.created = len(marked.created)
            outcome.updated = len(marked.updated)
        elif (
            previous_status == Leave.Status.APPROVED
            and new_status in REVOKING_STATUSES
        ):
            outcome.action = "reverted"
            outcome.reverted = len(
                revert_leave_attendance(employee_id, old_start, old_end),
            )
    return outcome
