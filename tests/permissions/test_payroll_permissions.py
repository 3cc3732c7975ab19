from rest_framework import status

from attendance_payroll.employees.api.permissions import ROLE_ADMIN
from attendance_payroll.employees.api.permissions import ROLE_EMPLOYEE
from attendance_payroll.employees.api.permissions import ROLE_LINE_MANAGER
from attendance_payroll.employees.api.permissions import ROLE_MANAGER
from attendance_payroll.employees.api.permissions import ROLE_PAYROLL
from attendance_payroll.payroll.models import Payroll
from tests.permissions.mixins import RoleAPITestCase


class PayrollPermissionTests(RoleAPITestCase):
    def test_payroll_and_admin_roles_see_every_payslip(self):
        for role in (ROLE_PAYROLL, ROLE_ADMIN):
            response = self.get("api_v1:payroll-record-list", role=role)
            self.assert_http_status(response, status.HTTP_200_OK)
            ids = {row["id"] for row in self.extract_results(response)}
            assert ids == {p.pk for p in self.payrolls.values()}, role

    def test_other_roles_only_see_their_own_payslip(self):
        for role in (ROLE_MANAGER, ROLE_LINE_MANAGER):
            response = self.get("api_v1:payroll-record-list", role=role)
            self.assert_http_status(response, status.HTTP_200_OK)
            assert self.extract_results(response) == [], role

        response = self.get("api_v1:payroll-record-list", role=ROLE_EMPLOYEE)
        ids = [row["id"] for row in self.extract_results(response)]
        assert ids == [self.payrolls["team"].pk]

    def test_only_payroll_and_admin_roles_generate(self):
        payload = {"month": 4, "year": 2024}
        denied = self.post(
            "api_v1:payroll-record-generate",
            role=ROLE_MANAGER,
            payload=payload,
        )
        self.assert_denied(denied)
        allowed = self.post(
            "api_v1:payroll-record-generate",
            role=ROLE_PAYROLL,
            payload=payload,
        )
        self.assert_http_status(allowed, status.HTTP_200_OK)
        assert allowed.data["updated"] == len(self.payrolls)

    def test_status_changes_require_payroll_role(self):
        url_kwargs = {"pk": self.payrolls["team"].pk}
        denied = self.patch(
            "api_v1:payroll-record-detail",
            role=ROLE_MANAGER,
            reverse_kwargs=url_kwargs,
            payload={"status": Payroll.Status.APPROVED},
        )
        self.assert_denied(denied)
        allowed = self.patch(
            "api_v1:payroll-record-detail",
            role=ROLE_PAYROLL,
            reverse_kwargs=url_kwargs,
            payload={"status": Payroll.Status.APPROVED},
        )
        self.assert_http_status(allowed, status.HTTP_200_OK)

    def test_settings_are_restricted(self):
        denied = self.get("api_v1:payroll-settings", role=ROLE_EMPLOYEE)
        self.assert_denied(denied)
        allowed = self.get("api_v1:payroll-settings", role=ROLE_PAYROLL)
        self.assert_http_status(allowed, status.HTTP_200_OK)
