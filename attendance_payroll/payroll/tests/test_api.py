from decimal import Decimal
from http import HTTPStatus

import pytest
from django.urls import reverse

from attendance_payroll.employees.api.permissions import ROLE_MANAGER
from attendance_payroll.employees.api.permissions import ROLE_PAYROLL
from attendance_payroll.payroll.models import Payroll
from attendance_payroll.payroll.models import PayrollSetting
from attendance_payroll.payroll.services import generate_payroll
from attendance_payroll.payroll.services import set_payroll_status

pytestmark = pytest.mark.django_db

GENERATE_URL = "api_v1:payroll-record-generate"
LIST_URL = "api_v1:payroll-record-list"
DETAIL_URL = "api_v1:payroll-record-detail"
SETTINGS_URL = "api_v1:payroll-settings"


@pytest.fixture
def payroll_officer(make_employee):
    return make_employee(groups=(ROLE_PAYROLL,))


def test_payroll_role_generates_a_month(api_client, payroll_officer, make_employee):
    worker = make_employee()
    api_client.force_authenticate(user=payroll_officer.user)

    resp = api_client.post(
        reverse(GENERATE_URL),
        {
            "month": 4,
            "year": 2024,
            "employee_ids": [worker.pk],
            "adjustments": [{"employee": worker.pk, "penalties": "150.00"}],
        },
        format="json",
    )

    assert resp.status_code == HTTPStatus.OK, resp.data
    assert resp.data["success"] is True
    assert resp.data["created"] == 1
    payroll = Payroll.objects.get(employee=worker, month=4, year=2024)
    assert payroll.penalties == Decimal("150.00")


@pytest.mark.parametrize(
    "payload",
    [
        {"month": 13, "year": 2024},
        {"month": 4},
        {"month": 4, "year": 2024, "adjustments": [{"employee": 1, "penalties": -1}]},
    ],
)
def test_generate_validates_input(api_client, payroll_officer, payload):
    api_client.force_authenticate(user=payroll_officer.user)

    resp = api_client.post(reverse(GENERATE_URL), payload, format="json")

    assert resp.status_code == HTTPStatus.BAD_REQUEST


def test_employee_cannot_generate(api_client, employee):
    api_client.force_authenticate(user=employee.user)

    resp = api_client.post(
        reverse(GENERATE_URL),
        {"month": 4, "year": 2024},
        format="json",
    )

    assert resp.status_code == HTTPStatus.FORBIDDEN
    assert not Payroll.objects.exists()


def test_employee_reads_only_own_payslips(api_client, employee, make_employee):
    other = make_employee()
    mine, _ = generate_payroll(employee.pk, 4, 2024)
    theirs, _ = generate_payroll(other.pk, 4, 2024)
    api_client.force_authenticate(user=employee.user)

    listing = api_client.get(reverse(LIST_URL))
    denied = api_client.get(reverse(DETAIL_URL, kwargs={"pk": theirs.pk}))
    own = api_client.get(reverse(DETAIL_URL, kwargs={"pk": mine.pk}))

    assert [row["id"] for row in listing.data["results"]] == [mine.pk]
    assert denied.status_code == HTTPStatus.NOT_FOUND
    assert own.status_code == HTTPStatus.OK
    assert own.data["employee_code"] == employee.employee_id
    assert own.data["working_days"] == 22


def test_payroll_role_filters_by_month(api_client, payroll_officer, employee):
    generate_payroll(employee.pk, 3, 2024)
    april, _ = generate_payroll(employee.pk, 4, 2024)
    api_client.force_authenticate(user=payroll_officer.user)

    resp = api_client.get(reverse(LIST_URL), {"month": 4, "year": 2024})

    assert [row["id"] for row in resp.data["results"]] == [april.pk]


def test_patch_moves_status(api_client, payroll_officer, employee):
    payroll, _ = generate_payroll(employee.pk, 4, 2024)
    api_client.force_authenticate(user=payroll_officer.user)
    url = reverse(DETAIL_URL, kwargs={"pk": payroll.pk})

    approved = api_client.patch(url, {"status": "APPROVED"}, format="json")
    paid = api_client.patch(url, {"status": "PAID"}, format="json")
    back = api_client.patch(url, {"status": "PENDING"}, format="json")

    assert approved.status_code == HTTPStatus.OK
    assert paid.data["status"] == Payroll.Status.PAID
    assert paid.data["paid_at"] is not None
    assert back.status_code == HTTPStatus.BAD_REQUEST
    assert back.data["code"] == "invalid"


def test_employee_cannot_patch_own_payslip(api_client, employee):
    payroll, _ = generate_payroll(employee.pk, 4, 2024)
    api_client.force_authenticate(user=employee.user)

    resp = api_client.patch(
        reverse(DETAIL_URL, kwargs={"pk": payroll.pk}),
        {"status": "APPROVED"},
        format="json",
    )

    assert resp.status_code == HTTPStatus.FORBIDDEN


def test_delete_draft_but_not_paid(api_client, payroll_officer, make_employee):
    draft, _ = generate_payroll(make_employee().pk, 4, 2024)
    paid, _ = generate_payroll(make_employee().pk, 4, 2024)
    set_payroll_status(paid, Payroll.Status.APPROVED)
    set_payroll_status(paid, Payroll.Status.PAID)
    api_client.force_authenticate(user=payroll_officer.user)

    removed = api_client.delete(reverse(DETAIL_URL, kwargs={"pk": draft.pk}))
    kept = api_client.delete(reverse(DETAIL_URL, kwargs={"pk": paid.pk}))

    assert removed.status_code == HTTPStatus.NO_CONTENT
    assert kept.status_code == HTTPStatus.BAD_REQUEST
    assert list(Payroll.objects.values_list("pk", flat=True)) == [paid.pk]


def test_settings_read_and_update(api_client, payroll_officer):
    api_client.force_authenticate(user=payroll_officer.user)
    url = reverse(SETTINGS_URL)

    current = api_client.get(url)
    updated = api_client.put(
        url,
        {
            "professional_tax": "150.00",
            "basic_percentage": "60",
            "variable_percentage": "40",
        },
        format="json",
    )
    unbalanced = api_client.put(url, {"basic_percentage": "50"}, format="json")

    assert current.status_code == HTTPStatus.OK
    assert current.data["tds_percentage"] == "10.00"
    assert updated.status_code == HTTPStatus.OK, updated.data
    assert unbalanced.status_code == HTTPStatus.BAD_REQUEST
    setting = PayrollSetting.load()
    assert setting.professional_tax == Decimal("150.00")
    assert setting.basic_percentage == Decimal(60)


def test_settings_are_hidden_from_managers(api_client, make_employee):
    manager = make_employee(groups=(ROLE_MANAGER,))
    api_client.force_authenticate(user=manager.user)

    assert api_client.get(reverse(SETTINGS_URL)).status_code == HTTPStatus.FORBIDDEN
