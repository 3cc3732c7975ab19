from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from attendance_payroll.audit.utils import client_ip
from attendance_payroll.employees.api.permissions import ROLE_ADMIN
from attendance_payroll.employees.api.permissions import ROLE_LINE_MANAGER
from attendance_payroll.employees.api.permissions import ROLE_MANAGER
from attendance_payroll.employees.api.permissions import IsAdminOrManagerCanWrite
from attendance_payroll.employees.api.permissions import is_elevated
from attendance_payroll.leaves.api.serializers import HolidaySerializer
from attendance_payroll.leaves.api.serializers import LeaveSerializer
from attendance_payroll.leaves.api.serializers import LeaveStatusResponseSerializer
from attendance_payroll.leaves.api.serializers import LeaveStatusSerializer
from attendance_payroll.leaves.models import Holiday
from attendance_payroll.leaves.models import Leave
from attendance_payroll.leaves.services import change_leave_status

LEAVE_APPROVER_ROLES = (ROLE_ADMIN, ROLE_MANAGER, ROLE_LINE_MANAGER)


@extend_schema_view(
    list=extend_schema(tags=["Holidays"]),
    retrieve=extend_schema(tags=["Holidays"]),
    create=extend_schema(tags=["Holidays"]),
    update=extend_schema(tags=["Holidays"]),
    partial_update=extend_schema(tags=["Holidays"]),
    destroy=extend_schema(tags=["Holidays"]),
)
class HolidayViewSet(viewsets.ModelViewSet):
    queryset = Holiday.objects.all()
    serializer_class = HolidaySerializer
    permission_classes = [IsAdminOrManagerCanWrite]


@extend_schema_view(
    list=extend_schema(tags=["Leaves"]),
    retrieve=extend_schema(tags=["Leaves"]),
    create=extend_schema(tags=["Leaves"]),
)
class LeaveViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """Leave requests; status changes go through the ``status`` action only."""

    serializer_class = LeaveSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        qs = Leave.objects.select_related("employee")
        user = self.request.user
        if is_elevated(user, LEAVE_APPROVER_ROLES):
            employee = self.request.query_params.get("employee")
            return qs.filter(employee_id=employee) if employee else qs
        employee = getattr(user, "employee", None)
        if employee is None:
            return qs.none()
        return qs.filter(employee=employee)

    def perform_create(self, serializer):
        user = self.request.user
        employee = serializer.validated_data.get("employee")
        if employee is None or not is_elevated(user, LEAVE_APPROVER_ROLES):
            employee = getattr(user, "employee", None)
        if employee is None:
            raise ValidationError({"employee": "No employee profile for this user"})
        serializer.save(employee=employee, status=Leave.Status.PENDING)

    def _may_change_status(self, leave: Leave, new_status: str) -> bool:
        user = self.request.user
        if is_elevated(user, LEAVE_APPROVER_ROLES):
            return True
        # Employees may withdraw their own requests.
        is_owner = leave.employee.user_id == user.pk
        return is_owner and new_status == Leave.Status.CANCELLED

    @extend_schema(
        tags=["Leaves"],
        request=LeaveStatusSerializer,
        responses=LeaveStatusResponseSerializer,
    )
    @action(detail=True, methods=["post"], url_path="status", url_name="status")
    def change_status(self, request, pk=None):
        """Approve, reject, hold or cancel a leave and reconcile attendance."""
        leave = self.get_object()
        ser = LeaveStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        if not self._may_change_status(leave, data["status"]):
            self.permission_denied(request, message="Forbidden")

        change = change_leave_status(
            leave,
            data["status"],
            actor=request.user,
            admin_comment=data.get("admin_comment"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            ip_address=client_ip(request),
        )
        return Response(
            {
                "leave": LeaveSerializer(change.leave).data,
                "previous_status": change.previous_status,
                "attendance": change.reconciliation.to_payload(),
            },
        )
