import datetime as dt

import pytest

from attendance_payroll.attendance.models import AttendanceRecord
from attendance_payroll.attendance.transitions import Event
from attendance_payroll.attendance.transitions import apply_transition

Status = AttendanceRecord.Status
SATURDAY = dt.date(2024, 3, 2)
TUESDAY = dt.date(2024, 3, 5)


@pytest.mark.parametrize(
    ("current", "expected"),
    [
        (None, Status.ABSENT),
        (Status.WEEKEND, Status.ABSENT),
        (Status.PRESENT, Status.ABSENT),
        (Status.ABSENT, None),
        (Status.LEAVE, None),
        (Status.HOLIDAY, None),
        (Status.HALF_DAY, None),
    ],
)
def test_cascade_absent(current, expected):
    assert apply_transition(current, Event.CASCADE_ABSENT, SATURDAY) == expected


@pytest.mark.parametrize(
    ("current", "expected"),
    [
        (None, Status.LEAVE),
        (Status.ABSENT, Status.LEAVE),
        (Status.PRESENT, Status.LEAVE),
        (Status.WEEKEND, Status.LEAVE),
        (Status.LEAVE, None),
    ],
)
def test_leave_approved(current, expected):
    assert apply_transition(current, Event.LEAVE_APPROVED, TUESDAY) == expected


def test_leave_revoked_depends_on_weekday():
    assert apply_transition(Status.LEAVE, Event.LEAVE_REVOKED, SATURDAY) == (
        Status.WEEKEND
    )
    assert apply_transition(Status.LEAVE, Event.LEAVE_REVOKED, TUESDAY) == (
        Status.ABSENT
    )
    assert apply_transition(Status.PRESENT, Event.LEAVE_REVOKED, TUESDAY) is None
    assert apply_transition(None, Event.LEAVE_REVOKED, TUESDAY) is None


def test_holiday_declared_only_rewrites_absent():
    assert apply_transition(Status.ABSENT, Event.HOLIDAY_DECLARED, TUESDAY) == (
        Status.HOLIDAY
    )
    assert apply_transition(Status.PRESENT, Event.HOLIDAY_DECLARED, TUESDAY) is None
    assert apply_transition(Status.LEAVE, Event.HOLIDAY_DECLARED, TUESDAY) is None
    assert apply_transition(None, Event.HOLIDAY_DECLARED, TUESDAY) is None


def test_unknown_event_is_rejected():
    with pytest.raises(ValueError, match="Unknown attendance event"):
        apply_transition(Status.ABSENT, "teleported", TUESDAY)
