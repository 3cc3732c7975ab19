import datetime as dt

import pytest
from django.utils import timezone

from attendance_payroll.attendance.calendar import days_in_month
from attendance_payroll.attendance.calendar import get_holiday
from attendance_payroll.attendance.calendar import is_friday
from attendance_payroll.attendance.calendar import is_holiday
from attendance_payroll.attendance.calendar import is_monday
from attendance_payroll.attendance.calendar import is_weekend
from attendance_payroll.attendance.calendar import iter_days
from attendance_payroll.attendance.calendar import next_day
from attendance_payroll.attendance.calendar import normalize_day
from attendance_payroll.attendance.calendar import previous_day
from attendance_payroll.attendance.calendar import weekend_days_in_month
from attendance_payroll.exceptions import ValidationError
from attendance_payroll.leaves.models import Holiday

# 2024-03-01 is a Friday.
FRIDAY = dt.date(2024, 3, 1)
SATURDAY = dt.date(2024, 3, 2)
SUNDAY = dt.date(2024, 3, 3)
MONDAY = dt.date(2024, 3, 4)


def test_normalize_day_accepts_date_datetime_and_string():
    assert normalize_day(FRIDAY) == FRIDAY
    assert normalize_day("2024-03-01") == FRIDAY
    assert normalize_day(dt.datetime(2024, 3, 1, 23, 59)) == FRIDAY
    assert normalize_day("2024-03-01T10:15:00") == FRIDAY


def test_normalize_day_uses_active_time_zone():
    late_utc = dt.datetime(2024, 3, 1, 20, 0, tzinfo=dt.UTC)
    with timezone.override("Asia/Kolkata"):
        assert normalize_day(late_utc) == SATURDAY


@pytest.mark.parametrize("value", ["not-a-date", "2024-13-40", "", 42])
def test_normalize_day_rejects_garbage(value):
    with pytest.raises(ValidationError):
        normalize_day(value)


def test_weekday_predicates():
    assert is_friday(FRIDAY)
    assert is_monday(MONDAY)
    assert is_weekend(SATURDAY)
    assert is_weekend(SUNDAY)
    assert not is_weekend(FRIDAY)
    assert not is_weekend(MONDAY)


def test_neighbouring_days_cross_month_boundaries():
    assert next_day(FRIDAY) == SATURDAY
    assert previous_day(MONDAY) == SUNDAY
    assert previous_day("2024-03-01") == dt.date(2024, 2, 29)
    assert next_day(dt.date(2023, 12, 31)) == dt.date(2024, 1, 1)


def test_iter_days_is_inclusive():
    days = list(iter_days(FRIDAY, MONDAY))
    assert days == [FRIDAY, SATURDAY, SUNDAY, MONDAY]
    assert list(iter_days(FRIDAY, FRIDAY)) == [FRIDAY]


def test_iter_days_rejects_reversed_range_before_iterating():
    with pytest.raises(ValidationError):
        iter_days(MONDAY, FRIDAY)


def test_month_helpers():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28
    assert weekend_days_in_month(2024, 3) == 10
    assert weekend_days_in_month(2024, 3, weekly_off=[6]) == 5
    with pytest.raises(ValidationError):
        days_in_month(2024, 13)


@pytest.mark.django_db
def test_holiday_lookup():
    Holiday.objects.create(date=MONDAY, name="Founders Day")
    assert is_holiday(MONDAY)
    assert is_holiday("2024-03-04")
    assert get_holiday(MONDAY).name == "Founders Day"
    assert not is_holiday(FRIDAY)
    assert get_holiday(FRIDAY) is None
