import datetime as dt

import pytest

from attendance_payroll.attendance.holidays import fix_holiday_attendance
from attendance_payroll.attendance.models import AttendanceRecord
from attendance_payroll.audit.models import AuditLog
from attendance_payroll.exceptions import ValidationError
from attendance_payroll.leaves.models import Holiday

Status = AttendanceRecord.Status
TUESDAY = dt.date(2024, 3, 5)
WEDNESDAY = dt.date(2024, 3, 6)

pytestmark = pytest.mark.django_db


def _record(employee, day, status):
    return AttendanceRecord.objects.create(employee=employee, date=day, status=status)


def test_absent_on_holiday_becomes_holiday(make_employee):
    absent = make_employee(name="Absent One")
    present = make_employee()
    _record(absent, TUESDAY, Status.ABSENT)
    _record(present, TUESDAY, Status.PRESENT)
    Holiday.objects.create(date=TUESDAY, name="Founders Day")

    result = fix_holiday_attendance()

    assert result.total_fixed == 1
    assert result.to_payload() == {
        "success": True,
        "totalFixed": 1,
        "details": [
            {
                "holiday": "Founders Day",
                "date": "2024-03-05",
                "employeesFixed": [
                    {"name": "Absent One", "employeeId": absent.employee_id},
                ],
                "count": 1,
            },
        ],
    }
    statuses = dict(
        AttendanceRecord.objects.filter(date=TUESDAY).values_list(
            "employee_id",
            "status",
        ),
    )
    assert statuses == {absent.pk: Status.HOLIDAY, present.pk: Status.PRESENT}
    assert AuditLog.objects.filter(action=AuditLog.Action.HOLIDAY_FIX).count() == 1


def test_fix_respects_date_bounds(employee):
    for day, name in ((TUESDAY, "First"), (WEDNESDAY, "Second")):
        Holiday.objects.create(date=day, name=name)
        _record(employee, day, Status.ABSENT)

    result = fix_holiday_attendance(WEDNESDAY, WEDNESDAY)

    assert result.total_fixed == 1
    assert result.details[0].holiday == "Second"
    assert (
        AttendanceRecord.objects.get(employee=employee, date=TUESDAY).status
        == Status.ABSENT
    )


def test_nothing_to_fix_is_not_audited(employee):
    Holiday.objects.create(date=TUESDAY, name="Founders Day")

    result = fix_holiday_attendance()

    assert result.total_fixed == 0
    assert result.details == []
    assert not AuditLog.objects.filter(action=AuditLog.Action.HOLIDAY_FIX).exists()


def test_second_fix_is_a_no_op(employee):
    Holiday.objects.create(date=TUESDAY, name="Founders Day")
    _record(employee, TUESDAY, Status.ABSENT)

    assert fix_holiday_attendance().total_fixed == 1
    assert fix_holiday_attendance().total_fixed == 0


def test_reversed_bounds_are_rejected():
    with pytest.raises(ValidationError):
        fix_holiday_attendance(WEDNESDAY, TUESDAY)
