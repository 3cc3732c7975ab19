import datetime as dt
from http import HTTPStatus
from unittest import mock

import pytest
from django.db import DatabaseError
from django.urls import reverse

from attendance_payroll.attendance import batch
from attendance_payroll.attendance.models import AttendanceRecord
from attendance_payroll.employees.api.permissions import ROLE_ADMIN
from attendance_payroll.employees.api.permissions import ROLE_MANAGER
from attendance_payroll.leaves.models import Holiday

Status = AttendanceRecord.Status
FRIDAY = dt.date(2024, 3, 1)
SATURDAY = dt.date(2024, 3, 2)
TUESDAY = dt.date(2024, 3, 5)

pytestmark = pytest.mark.django_db


def _record(employee, day, status):
    return AttendanceRecord.objects.create(employee=employee, date=day, status=status)


DAILY_RUN_URL = "/api/v1/attendance/daily-run/"


def test_daily_run_with_cron_secret(api_client, employee):
    resp = api_client.post(
        DAILY_RUN_URL,
        {"date": "2024-03-05"},
        format="json",
        HTTP_AUTHORIZATION="Bearer test-cron-secret",
    )

    assert resp.status_code == HTTPStatus.OK
    assert resp.data["success"] is True
    assert resp.data["results"]["absentsMarked"] == 1
    assert AttendanceRecord.objects.get(employee=employee).status == Status.ABSENT


def test_daily_run_get_processes_yesterday(api_client, employee):
    with mock.patch.object(batch, "default_target_date", return_value=TUESDAY):
        resp = api_client.get(
            DAILY_RUN_URL,
            HTTP_AUTHORIZATION="Bearer test-cron-secret",
        )

    assert resp.status_code == HTTPStatus.OK
    assert resp.data["results"]["date"] == "2024-03-05"


@pytest.mark.parametrize("header", [None, "Bearer wrong-secret", "Basic abc"])
def test_daily_run_rejects_missing_or_wrong_secret(api_client, employee, header):
    extra = {"HTTP_AUTHORIZATION": header} if header else {}

    resp = api_client.post(DAILY_RUN_URL, {"date": "2024-03-05"}, **extra)

    assert resp.status_code == HTTPStatus.FORBIDDEN
    assert not AttendanceRecord.objects.exists()


def test_daily_run_empty_secret_disables_bearer_path(api_client, employee, settings):
    settings.ATTENDANCE_CRON_SECRET = ""

    resp = api_client.post(DAILY_RUN_URL, HTTP_AUTHORIZATION="Bearer ")

    assert resp.status_code == HTTPStatus.FORBIDDEN


def test_daily_run_as_admin_session(api_client, make_employee):
    admin = make_employee(groups=(ROLE_ADMIN,))
    api_client.force_authenticate(user=admin.user)

    resp = api_client.post(DAILY_RUN_URL, {"date": "2024-03-02"}, format="json")

    assert resp.status_code == HTTPStatus.OK
    assert resp.data["isWeekend"] is True


def test_daily_run_denied_for_manager(api_client, make_employee):
    manager = make_employee(groups=(ROLE_MANAGER,))
    api_client.force_authenticate(user=manager.user)

    resp = api_client.post(DAILY_RUN_URL, {"date": "2024-03-05"}, format="json")

    assert resp.status_code == HTTPStatus.FORBIDDEN


def test_daily_run_reports_store_failure(api_client, employee):
    with mock.patch.object(
        batch,
        "get_holiday",
        side_effect=DatabaseError("db down"),
    ):
        resp = api_client.post(
            DAILY_RUN_URL,
            {"date": "2024-03-05"},
            format="json",
            HTTP_AUTHORIZATION="Bearer test-cron-secret",
        )

    assert resp.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert resp.data == {
        "success": False,
        "error": "Failed to process daily attendance",
        "details": "db down",
    }


def test_fix_holidays_endpoint_requires_admin(api_client, make_employee):
    admin = make_employee(groups=(ROLE_ADMIN,))
    worker = make_employee()
    Holiday.objects.create(date=TUESDAY, name="Founders Day")
    _record(worker, TUESDAY, Status.ABSENT)
    url = reverse("api_v1:attendance-fix-holidays")

    api_client.force_authenticate(user=worker.user)
    assert api_client.post(url, {}, format="json").status_code == HTTPStatus.FORBIDDEN

    api_client.force_authenticate(user=admin.user)
    resp = api_client.post(url, {}, format="json")

    assert resp.status_code == HTTPStatus.OK
    assert resp.data["totalFixed"] == 1


def test_records_are_scoped_to_the_employee(api_client, make_employee):
    mine = make_employee()
    theirs = make_employee()
    _record(mine, TUESDAY, Status.ABSENT)
    _record(theirs, TUESDAY, Status.ABSENT)
    api_client.force_authenticate(user=mine.user)

    resp = api_client.get(reverse("api_v1:attendance-record-list"))

    assert resp.status_code == HTTPStatus.OK
    assert [row["employee"] for row in resp.data["results"]] == [mine.pk]


def test_records_filters_for_managers(api_client, make_employee):
    manager = make_employee(groups=(ROLE_MANAGER,))
    worker = make_employee()
    _record(worker, FRIDAY, Status.ABSENT)
    _record(worker, TUESDAY, Status.PRESENT)
    api_client.force_authenticate(user=manager.user)

    resp = api_client.get(
        reverse("api_v1:attendance-record-list"),
        {"employee": worker.pk, "status": "absent", "end_date": "2024-03-04"},
    )

    assert resp.status_code == HTTPStatus.OK
    rows = resp.data["results"]
    assert [(row["date"], row["status"]) for row in rows] == [("2024-03-01", "ABSENT")]
    assert rows[0]["employee_code"] == worker.employee_id


def test_cascade_status_endpoint(api_client, employee):
    _record(employee, FRIDAY, Status.ABSENT)
    _record(employee, SATURDAY, Status.ABSENT)
    api_client.force_authenticate(user=employee.user)

    resp = api_client.get(
        reverse("api_v1:attendance-record-cascade-status"),
        {"employee": employee.pk, "date": "2024-03-02"},
    )

    assert resp.status_code == HTTPStatus.OK
    assert resp.data == {"isCascaded": True, "reason": "Friday was absent"}


def test_cascade_absences_endpoint(api_client, employee):
    _record(employee, FRIDAY, Status.ABSENT)
    api_client.force_authenticate(user=employee.user)

    resp = api_client.get(
        reverse("api_v1:attendance-record-cascade-absences"),
        {"employee": employee.pk, "start_date": "2024-03-01", "end_date": "2024-03-31"},
    )

    assert resp.status_code == HTTPStatus.OK
    assert resp.data == [{"date": "2024-03-02", "reason": "Friday was absent"}]


def test_cascade_status_of_another_employee_is_forbidden(api_client, make_employee):
    me = make_employee()
    other = make_employee()
    api_client.force_authenticate(user=me.user)

    resp = api_client.get(
        reverse("api_v1:attendance-record-cascade-status"),
        {"employee": other.pk, "date": "2024-03-02"},
    )

    assert resp.status_code == HTTPStatus.FORBIDDEN


def test_cascade_absences_rejects_reversed_range(api_client, employee):
    api_client.force_authenticate(user=employee.user)

    resp = api_client.get(
        reverse("api_v1:attendance-record-cascade-absences"),
        {"employee": employee.pk, "start_date": "2024-03-31", "end_date": "2024-03-01"},
    )

    assert resp.status_code == HTTPStatus.BAD_REQUEST
