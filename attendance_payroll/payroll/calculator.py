"""Monthly payroll arithmetic.

Pure functions over ``Decimal``; nothing here touches the database. Every
monetary output is rounded to two places with ROUND_HALF_UP, intermediate
values (the per-day rate in particular) are not.

Weekly-off days are excluded from the working-day count, so only records on
working days earn pay. A cascaded ABSENT on a weekly-off day forfeits one
day of pay.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from dataclasses import asdict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP
from decimal import Decimal

from attendance_payroll.attendance.calendar import WEEKEND_DAYS
from attendance_payroll.attendance.calendar import days_in_month
from attendance_payroll.attendance.calendar import weekend_days_in_month
from attendance_payroll.attendance.models import AttendanceRecord
from attendance_payroll.employees.models import Employee
from attendance_payroll.exceptions import ValidationError

TWO_PLACES = Decimal("0.01")
HUNDRED = Decimal(100)
HALF = Decimal("0.5")
ZERO = Decimal(0)
# Largest value Payroll.target_achievement (5 digits, 2 places) can store.
MAX_TARGET_ACHIEVEMENT = Decimal("999.99")

Status = AttendanceRecord.Status


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value) -> Decimal:
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PayrollPeriod:
    year: int
    month: int
    total_days: int
    weekend_days: int
    weekly_off: tuple[int, ...] = WEEKEND_DAYS

    @classmethod
    def for_month(
        cls,
        year: int,
        month: int,
        weekly_off: Iterable[int] = WEEKEND_DAYS,
    ) -> PayrollPeriod:
        off = tuple(sorted(set(weekly_off)))
        return cls(
            year=year,
            month=month,
            total_days=days_in_month(year, month),
            weekend_days=weekend_days_in_month(year, month, off),
            weekly_off=off,
        )

    @property
    def working_days(self) -> int:
        return self.total_days - self.weekend_days

    @property
    def first_day(self) -> dt.date:
        return dt.date(self.year, self.month, 1)

    @property
    def last_day(self) -> dt.date:
        return dt.date(self.year, self.month, self.total_days)

    def is_working_day(self, day: dt.date) -> bool:
        return day.weekday() not in self.weekly_off


@dataclass(frozen=True)
class AttendanceTally:
    """Per-status counts for one employee-month.

    ``present``/``half_day``/``absent``/``leave``/``holiday`` only count
    working days. Rows on weekly-off days land in ``weekend`` and, when
    ABSENT, also in ``weekend_absent``.
    """

    present: int = 0
    half_day: int = 0
    absent: int = 0
    leave: int = 0
    holiday: int = 0
    weekend: int = 0
    weekend_absent: int = 0

    @classmethod
    def from_records(
        cls,
        records: Iterable,
        weekly_off: Iterable[int] = WEEKEND_DAYS,
    ) -> AttendanceTally:
        """Tally records exposing ``date`` and ``status`` attributes."""
        off = set(weekly_off)
        counts = dict.fromkeys(
            ("present", "half_day", "absent", "leave", "holiday", "weekend"),
            0,
        )
        weekend_absent = 0
        by_status = {
            Status.PRESENT.value: "present",
            Status.HALF_DAY.value: "half_day",
            Status.ABSENT.value: "absent",
            Status.LEAVE.value: "leave",
            Status.HOLIDAY.value: "holiday",
            Status.WEEKEND.value: "weekend",
        }
        for record in records:
            if record.date.weekday() in off:
                counts["weekend"] += 1
                if record.status == Status.ABSENT:
                    weekend_absent += 1
                continue
            counts[by_status[str(record.status)]] += 1
        return cls(**counts, weekend_absent=weekend_absent)

    @property
    def paid_full_days(self) -> int:
        return self.present + self.leave + self.holiday

    @property
    def effective_paid_days(self) -> Decimal:
        paid = Decimal(self.paid_full_days) + HALF * self.half_day
        return max(paid - self.weekend_absent, ZERO)


@dataclass(frozen=True)
class PayrollConfig:
    professional_tax: Decimal = Decimal(200)
    tds_percentage: Decimal = Decimal(10)
    basic_percentage: Decimal = Decimal(70)
    variable_percentage: Decimal = Decimal(30)


@dataclass(frozen=True)
class Adjustments:
    """Externally supplied inputs: deductions and sales target achievement."""

    penalties: Decimal = ZERO
    advance_payment: Decimal = ZERO
    other_deductions: Decimal = ZERO
    target_achievement: Decimal = ZERO

    def __post_init__(self):
        for name in ("penalties", "advance_payment", "other_deductions"):
            value = to_decimal(getattr(self, name))
            if value < 0:
                msg = f"{name} cannot be negative"
                raise ValidationError(msg)
            object.__setattr__(self, name, value)
        achievement = to_decimal(self.target_achievement)
        if achievement < 0:
            msg = "target_achievement cannot be negative"
            raise ValidationError(msg)
        if achievement > MAX_TARGET_ACHIEVEMENT:
            msg = f"target_achievement cannot exceed {MAX_TARGET_ACHIEVEMENT}"
            raise ValidationError(msg)
        object.__setattr__(self, "target_achievement", achievement)


@dataclass(frozen=True)
class PayrollBreakdown:
    total_days: int
    weekend_days: int
    working_days: int
    days_present: Decimal
    half_days: int
    days_absent: Decimal
    basic_salary: Decimal
    variable_pay: Decimal
    target_achievement: Decimal
    basic_payable: Decimal
    variable_payable: Decimal
    gross_salary: Decimal
    professional_tax: Decimal
    tds: Decimal
    penalties: Decimal
    advance_payment: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    net_salary: Decimal

    def as_dict(self) -> dict:
        return asdict(self)


def calculate_payroll(  # noqa: PLR0913
    salary,
    salary_type: str,
    period: PayrollPeriod,
    tally: AttendanceTally,
    config: PayrollConfig | None = None,
    adjustments: Adjustments | None = None,
) -> PayrollBreakdown:
    """Compute one employee-month payslip.

    Raises:
        ValidationError: when the period has no working days or the salary
            is negative.
    """
    config = config or PayrollConfig()
    adjustments = adjustments or Adjustments()

    working_days = period.working_days
    if working_days <= 0:
        msg = (
            f"No working days in {period.year}-{period.month:02d} "
            f"with weekly off {list(period.weekly_off)}"
        )
        raise ValidationError(msg)

    salary = to_decimal(salary)
    if salary < 0:
        msg = "Salary cannot be negative"
        raise ValidationError(msg)

    effective_paid = tally.effective_paid_days
    days_absent = Decimal(working_days) - effective_paid

    if salary_type == Employee.SalaryType.VARIABLE:
        basic_salary = round_money(salary * config.basic_percentage / HUNDRED)
        variable_pay = round_money(salary * config.variable_percentage / HUNDRED)
    else:
        basic_salary = round_money(salary)
        variable_pay = round_money(ZERO)

    per_day_basic = basic_salary / Decimal(working_days)
    basic_payable = round_money(per_day_basic * effective_paid)

    achievement = min(adjustments.target_achievement, HUNDRED)
    variable_payable = round_money(variable_pay * achievement / HUNDRED)

    gross_salary = basic_payable + variable_payable

    professional_tax = round_money(config.professional_tax)
    tds = round_money(gross_salary * config.tds_percentage / HUNDRED)
    penalties = round_money(adjustments.penalties)
    advance_payment = round_money(adjustments.advance_payment)
    other_deductions = round_money(adjustments.other_deductions)
    total_deductions = (
        professional_tax + tds + penalties + advance_payment + other_deductions
    )
    net_salary = round_money(gross_salary - total_deductions)

    return PayrollBreakdown(
        total_days=period.total_days,
        weekend_days=period.weekend_days,
        working_days=working_days,
        days_present=effective_paid,
        half_days=tally.half_day,
        days_absent=days_absent,
        basic_salary=basic_salary,
        variable_pay=variable_pay,
        target_achievement=round_money(adjustments.target_achievement),
        basic_payable=basic_payable,
        variable_payable=variable_payable,
        gross_salary=gross_salary,
        professional_tax=professional_tax,
        tds=tds,
        penalties=penalties,
        advance_payment=advance_payment,
        other_deductions=other_deductions,
        total_deductions=total_deductions,
        net_salary=net_salary,
    )
