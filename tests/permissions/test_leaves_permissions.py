from rest_framework import status

from attendance_payroll.employees.api.permissions import ROLE_ADMIN
from attendance_payroll.employees.api.permissions import ROLE_EMPLOYEE
from attendance_payroll.employees.api.permissions import ROLE_LINE_MANAGER
from attendance_payroll.employees.api.permissions import ROLE_MANAGER
from attendance_payroll.employees.api.permissions import ROLE_PAYROLL
from attendance_payroll.leaves.models import Leave
from tests.permissions.mixins import WORKDAY
from tests.permissions.mixins import RoleAPITestCase


class LeavePermissionTests(RoleAPITestCase):
    def test_approvers_see_all_leave_requests(self):
        for role in (ROLE_ADMIN, ROLE_MANAGER, ROLE_LINE_MANAGER):
            response = self.get("api_v1:leave-request-list", role=role)
            self.assert_http_status(response, status.HTTP_200_OK)
            employees = {row["employee"] for row in self.extract_results(response)}
            assert employees == {
                self.roles[ROLE_EMPLOYEE].employee.id,
                self.others["employee"].employee.id,
            }, role

    def test_payroll_role_only_sees_own_requests(self):
        response = self.get("api_v1:leave-request-list", role=ROLE_PAYROLL)
        self.assert_http_status(response, status.HTTP_200_OK)
        assert self.extract_results(response) == []

    def test_employee_can_submit_own_leave_request(self):
        payload = {
            "leave_type": Leave.LeaveType.SICK,
            "start_date": WORKDAY.isoformat(),
            "end_date": WORKDAY.isoformat(),
        }
        response = self.post(
            "api_v1:leave-request-list",
            role=ROLE_EMPLOYEE,
            payload=payload,
        )
        self.assert_http_status(response, status.HTTP_201_CREATED)
        assert response.data["employee"] == self.roles[ROLE_EMPLOYEE].employee.id

    def test_payroll_role_cannot_approve(self):
        response = self.post(
            "api_v1:leave-request-status",
            role=ROLE_PAYROLL,
            reverse_kwargs={"pk": self.leave_requests["team"].pk},
            payload={"status": Leave.Status.APPROVED},
        )
        # The payroll user cannot even see the request.
        self.assert_denied(response, code=status.HTTP_404_NOT_FOUND)

    def test_employee_cannot_touch_other_requests(self):
        response = self.post(
            "api_v1:leave-request-status",
            role=ROLE_EMPLOYEE,
            reverse_kwargs={"pk": self.leave_requests["other"].pk},
            payload={"status": Leave.Status.CANCELLED},
        )
        self.assert_denied(response, code=status.HTTP_404_NOT_FOUND)

    def test_line_manager_approval_overrides_present_day(self):
        response = self.post(
            "api_v1:leave-request-status",
            role=ROLE_LINE_MANAGER,
            reverse_kwargs={"pk": self.leave_requests["team"].pk},
            payload={"status": Leave.Status.APPROVED},
        )
        self.assert_http_status(response, status.HTTP_200_OK)
        assert response.data["attendance"]["updated"] == 1
        record = self.attendance_records["team"]
        record.refresh_from_db()
        assert record.status == "LEAVE"
