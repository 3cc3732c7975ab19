import datetime as dt
import json
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from attendance_payroll.attendance.models import AttendanceRecord
from attendance_payroll.attendance.tasks import fix_holiday_attendance_task
from attendance_payroll.attendance.tasks import mark_daily_attendance
from attendance_payroll.leaves.models import Holiday

Status = AttendanceRecord.Status

pytestmark = pytest.mark.django_db


def test_mark_daily_attendance_command_for_one_day(employee):
    out = StringIO()

    call_command("mark_daily_attendance", "--date", "2024-03-05", stdout=out)

    lines = out.getvalue().strip().splitlines()
    payload = json.loads(lines[0])
    assert payload["results"]["absentsMarked"] == 1
    assert "Processed 1 day(s)" in lines[-1]


def test_mark_daily_attendance_command_backfills_a_range(employee):
    out = StringIO()

    call_command(
        "mark_daily_attendance",
        "--start",
        "2024-03-04",
        "--end",
        "2024-03-06",
        stdout=out,
    )

    statuses = dict(
        AttendanceRecord.objects.filter(employee=employee).values_list(
            "date",
            "status",
        ),
    )
    # Monday's absence cascades onto the Sunday before the range.
    assert statuses == {
        dt.date(2024, 3, 3): Status.ABSENT,
        dt.date(2024, 3, 4): Status.ABSENT,
        dt.date(2024, 3, 5): Status.ABSENT,
        dt.date(2024, 3, 6): Status.ABSENT,
    }
    assert "Processed 3 day(s)" in out.getvalue()


@pytest.mark.parametrize(
    "args",
    [
        ["--start", "2024-03-04"],
        ["--date", "2024-03-04", "--start", "2024-03-01", "--end", "2024-03-02"],
        ["--start", "2024-03-06", "--end", "2024-03-04"],
        ["--date", "yesterday-ish"],
    ],
)
def test_mark_daily_attendance_command_rejects_bad_arguments(args):
    with pytest.raises(CommandError):
        call_command("mark_daily_attendance", *args, stdout=StringIO())


def test_fix_holiday_attendance_command(employee):
    Holiday.objects.create(date=dt.date(2024, 3, 5), name="Founders Day")
    AttendanceRecord.objects.create(
        employee=employee,
        date=dt.date(2024, 3, 5),
        status=Status.ABSENT,
    )
    out = StringIO()

    call_command("fix_holiday_attendance", stdout=out)

    assert "Fixed 1 attendance records" in out.getvalue()


def test_daily_task_returns_payload(employee):
    payload = mark_daily_attendance.delay("2024-03-02").get()

    assert payload["success"] is True
    assert payload["isWeekend"] is True
    assert payload["results"]["weekendsMarked"] == 1


def test_holiday_fix_task_returns_payload():
    payload = fix_holiday_attendance_task.delay().get()

    assert payload == {"success": True, "totalFixed": 0, "details": []}
