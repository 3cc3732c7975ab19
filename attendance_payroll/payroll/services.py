"""Payroll generation: attendance in, persisted Payroll rows out."""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field

from django.conf import settings
from django.db import DatabaseError
from django.db import transaction
from django.utils import timezone

from attendance_payroll.attendance.calendar import WEEKEND_DAYS
from attendance_payroll.attendance.models import AttendanceRecord
from attendance_payroll.audit.models import AuditLog
from attendance_payroll.audit.utils import log_action
from attendance_payroll.employees.models import Employee
from attendance_payroll.exceptions import EngineError
from attendance_payroll.exceptions import NotFoundError
from attendance_payroll.exceptions import ValidationError
from attendance_payroll.payroll.calculator import Adjustments
from attendance_payroll.payroll.calculator import AttendanceTally
from attendance_payroll.payroll.calculator import PayrollConfig
from attendance_payroll.payroll.calculator import PayrollPeriod
from attendance_payroll.payroll.calculator import calculate_payroll
from attendance_payroll.payroll.models import Payroll
from attendance_payroll.payroll.models import PayrollSetting

logger = logging.getLogger(__name__)

RUN_FAILED_MESSAGE = "Failed to generate payroll"


class PayrollLockedError(ValidationError):
    """The month's payroll is already PAID and can no longer be recomputed."""


@dataclass(frozen=True)
class PayrollError:
    employee_id: str
    name: str
    error: str

    def to_payload(self) -> dict:
        return {"employeeId": self.employee_id, "name": self.name, "error": self.error}


@dataclass
class PayrollRunResult:
    month: int
    year: int
    success: bool = True
    total_employees: int = 0
    created: int = 0
    updated: int = 0
    skipped_paid: int = 0
    errors: list[PayrollError] = field(default_factory=list)
    error: str | None = None
    details: str | None = None

    def to_payload(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error, "details": self.details}
        return {
            "success": True,
            "month": self.month,
            "year": self.year,
            "totalEmployees": self.total_employees,
            "created": self.created,
            "updated": self.updated,
            "skippedPaid": self.skipped_paid,
            "errors": [err.to_payload() for err in self.errors],
        }


def weekly_off_weekdays() -> tuple[int, ...]:
    days = getattr(settings, "WEEKLY_OFF_WEEKDAYS", WEEKEND_DAYS)
    return tuple(int(day) for day in days)


def get_payroll_config() -> PayrollConfig:
    setting = PayrollSetting.load()
    return PayrollConfig(
        professional_tax=setting.professional_tax,
        tds_percentage=setting.tds_percentage,
        basic_percentage=setting.basic_percentage,
        variable_percentage=setting.variable_percentage,
    )


def previous_month(today: dt.date | None = None) -> tuple[int, int]:
    """``(month, year)`` of the month before ``today``."""
    today = today or timezone.localdate()
    first = today.replace(day=1)
    last_month = first - dt.timedelta(days=1)
    return last_month.month, last_month.year


def _adjustments_from(payroll: Payroll | None) -> Adjustments:
    if payroll is None:
        return Adjustments()
    return Adjustments(
        penalties=payroll.penalties,
        advance_payment=payroll.advance_payment,
        other_deductions=payroll.other_deductions,
        target_achievement=payroll.target_achievement,
    )


@transaction.atomic
def generate_payroll(  # noqa: PLR0913
    employee_id: int,
    month: int,
    year: int,
    *,
    adjustments: Adjustments | None = None,
    config: PayrollConfig | None = None,
    actor=None,
) -> tuple[Payroll, bool]:
    """Compute and store one employee's payroll for ``month``/``year``.

    A draft (PENDING/APPROVED) row is overwritten and goes back to PENDING.
    Without explicit ``adjustments`` a recomputation keeps the draft's
    existing deductions and target achievement.

    Returns:
        ``(payroll, created)``
    """
    try:
        employee = Employee.objects.get(pk=employee_id)
    except Employee.DoesNotExist:
        msg = f"Employee {employee_id} not found"
        raise NotFoundError(msg) from None

    existing = (
        Payroll.objects.select_for_update()
        .filter(employee=employee, month=month, year=year)
        .first()
    )
    if existing is not None and existing.is_locked:
        msg = f"Payroll for {employee.employee_id} {year}-{month:02d} is already paid"
        raise PayrollLockedError(msg)

    period = PayrollPeriod.for_month(year, month, weekly_off_weekdays())
    records = AttendanceRecord.objects.filter(
        employee=employee,
        date__gte=period.first_day,
        date__lte=period.last_day,
    ).only("date", "status")
    tally = AttendanceTally.from_records(records, period.weekly_off)
    breakdown = calculate_payroll(
        employee.salary,
        employee.salary_type,
        period,
        tally,
        config=config or get_payroll_config(),
        adjustments=adjustments or _adjustments_from(existing),
    )

    payroll, created = Payroll.objects.update_or_create(
        employee=employee,
        month=month,
        year=year,
        defaults={
            **breakdown.as_dict(),
            "status": Payroll.Status.PENDING,
            "generated_at": timezone.now(),
        },
    )
    log_action(
        AuditLog.Action.PAYROLL_GENERATED,
        actor=actor,
        message=f"Payroll {year}-{month:02d} for {employee.employee_id}",
        model_name="payroll.Payroll",
        record_id=payroll.pk,
        after={
            "gross_salary": str(payroll.gross_salary),
            "net_salary": str(payroll.net_salary),
            "created": created,
        },
    )
    return payroll, created


def generate_payroll_for_month(  # noqa: PLR0913
    month: int,
    year: int,
    employee_ids: Iterable[int] | None = None,
    *,
    adjustments: Mapping[int, Adjustments] | None = None,
    actor=None,
) -> PayrollRunResult:
    """Generate payroll for every active employee (or the given ones).

    A failure for one employee is recorded in the result and the run goes on.
    """
    result = PayrollRunResult(month=month, year=year)
    adjustments = adjustments or {}
    try:
        config = get_payroll_config()
        employees = Employee.objects.order_by("pk")
        if employee_ids is not None:
            employees = employees.filter(pk__in=list(employee_ids))
        else:
            employees = employees.filter(is_active=True)
        employees = list(employees)
    except DatabaseError as exc:
        logger.exception("Payroll run %s-%02d aborted before processing", year, month)
        result.success = False
        result.error = RUN_FAILED_MESSAGE
        result.details = str(exc)
        return result

    result.total_employees = len(employees)
    for employee in employees:
        try:
            _payroll, created = generate_payroll(
                employee.pk,
                month,
                year,
                adjustments=adjustments.get(employee.pk),
                config=config,
                actor=actor,
            )
        except PayrollLockedError:
            result.skipped_paid += 1
            continue
        except (EngineError, DatabaseError) as exc:
            logger.warning(
                "Payroll %s-%02d failed for employee %s: %s",
                year,
                month,
                employee.employee_id,
                exc,
            )
            result.errors.append(
                PayrollError(
                    employee_id=employee.employee_id,
                    name=employee.name,
                    error=str(exc),
                ),
            )
            continue
        if created:
            result.created += 1
        else:
            result.updated += 1

    logger.info(
        "Payroll %s-%02d: created=%d updated=%d paid=%d errors=%d",
        year,
        month,
        result.created,
        result.updated,
        result.skipped_paid,
        len(result.errors),
    )
    return result


@transaction.atomic
def set_payroll_status(payroll: Payroll, new_status: str, *, actor=None) -> Payroll:
    """Move a payroll along PENDING -> APPROVED -> PAID.

    APPROVED may go back to PENDING; PAID is final.
    """
    allowed = {
        Payroll.Status.PENDING: {Payroll.Status.APPROVED},
        Payroll.Status.APPROVED: {Payroll.Status.PENDING, Payroll.Status.PAID},
        Payroll.Status.PAID: set(),
    }
    locked = Payroll.objects.select_for_update().get(pk=payroll.pk)
    current = locked.status
    if new_status == current:
        return locked
    if new_status not in allowed[current]:
        msg = f"Cannot move payroll from {current} to {new_status}"
        raise ValidationError(msg)
    locked.status = new_status
    locked.paid_at = timezone.now() if new_status == Payroll.Status.PAID else None
    locked.save(update_fields=["status", "paid_at", "updated_at"])
    log_action(
        AuditLog.Action.PAYROLL_STATUS_CHANGED,
        actor=actor,
        message=f"Payroll {locked.pk}: {current} -> {new_status}",
        model_name="payroll.Payroll",
        record_id=locked.pk,
        before={"status": current},
        after={"status": new_status},
    )
    return locked


@transaction.atomic
def delete_payroll(payroll: Payroll, *, actor=None) -> None:
    locked = Payroll.objects.select_for_update().get(pk=payroll.pk)
    if locked.is_locked:
        msg = "Paid payroll records cannot be deleted"
        raise PayrollLockedError(msg)
    record_id = locked.pk
    snapshot = {
        "employee": locked.employee_id,
        "month": locked.month,
        "year": locked.year,
        "net_salary": str(locked.net_salary),
    }
    locked.delete()
    log_action(
        AuditLog.Action.PAYROLL_DELETED,
        actor=actor,
        message=f"Payroll {record_id} deleted",
        model_name="payroll.Payroll",
        record_id=record_id,
        before=snapshot,
    )
