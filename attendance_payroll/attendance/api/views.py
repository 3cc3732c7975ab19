from http import HTTPStatus

from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import OpenApiTypes
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework.authentication import SessionAuthentication
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from attendance_payroll.attendance.api.serializers import AttendanceRecordSerializer
from attendance_payroll.attendance.api.serializers import CascadeAbsenceSerializer
from attendance_payroll.attendance.api.serializers import CascadeRangeQuerySerializer
from attendance_payroll.attendance.api.serializers import CascadeStatusQuerySerializer
from attendance_payroll.attendance.api.serializers import CascadeStatusSerializer
from attendance_payroll.attendance.api.serializers import DailyRunRequestSerializer
from attendance_payroll.attendance.api.serializers import DateRangeSerializer
from attendance_payroll.attendance.batch import run_daily_attendance
from attendance_payroll.attendance.cascade import get_weekend_cascade_absences
from attendance_payroll.attendance.cascade import is_weekend_cascaded_absent
from attendance_payroll.attendance.holidays import fix_holiday_attendance
from attendance_payroll.attendance.models import AttendanceRecord
from attendance_payroll.audit.utils import client_ip
from attendance_payroll.employees.api.permissions import ROLE_ADMIN
from attendance_payroll.employees.api.permissions import ROLE_LINE_MANAGER
from attendance_payroll.employees.api.permissions import ROLE_MANAGER
from attendance_payroll.employees.api.permissions import ROLE_PAYROLL
from attendance_payroll.employees.api.permissions import HasCronSecretOrIsAdmin
from attendance_payroll.employees.api.permissions import IsAdminOnly
from attendance_payroll.employees.api.permissions import is_elevated

ATTENDANCE_VIEWER_ROLES = (ROLE_ADMIN, ROLE_MANAGER, ROLE_PAYROLL, ROLE_LINE_MANAGER)


def _request_actor(request):
    user = getattr(request, "user", None)
    if user is not None and getattr(user, "is_authenticated", False):
        return user
    return None


class DailyAttendanceRunView(APIView):
    """Trigger the daily attendance batch.

    ``GET`` is the scheduler entrypoint and processes yesterday; ``POST``
    accepts an explicit ``date``. Callers authenticate with
    ``Authorization: Bearer <ATTENDANCE_CRON_SECRET>`` or an admin session.
    """

    # JWT is left out so the bearer secret is not parsed as a token.
    authentication_classes = [SessionAuthentication]
    permission_classes = [HasCronSecretOrIsAdmin]

    def _respond(self, result):
        http_status = HTTPStatus.OK
        if not result.success:
            http_status = HTTPStatus.INTERNAL_SERVER_ERROR
        return Response(result.to_payload(), status=http_status)

    @extend_schema(tags=["Attendance Batch"], request=None)
    def get(self, request):
        return self._respond(run_daily_attendance(actor=_request_actor(request)))

    @extend_schema(tags=["Attendance Batch"], request=DailyRunRequestSerializer)
    def post(self, request):
        ser = DailyRunRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = run_daily_attendance(
            ser.validated_data.get("date"),
            actor=_request_actor(request),
        )
        return self._respond(result)


class FixHolidayAttendanceView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOnly]

    @extend_schema(tags=["Attendance Batch"], request=DateRangeSerializer)
    def post(self, request):
        ser = DateRangeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = fix_holiday_attendance(
            ser.validated_data.get("start_date"),
            ser.validated_data.get("end_date"),
            actor=request.user,
            ip_address=client_ip(request),
        )
        return Response(result.to_payload())


@extend_schema_view(
    list=extend_schema(
        tags=["Attendance"],
        parameters=[
            OpenApiParameter(
                name="employee",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                description="Filter by employee ID",
            ),
            OpenApiParameter(
                name="start_date",
                type=OpenApiTypes.DATE,
                location=OpenApiParameter.QUERY,
                description="Filter records from this date (inclusive)",
            ),
            OpenApiParameter(
                name="end_date",
                type=OpenApiTypes.DATE,
                location=OpenApiParameter.QUERY,
                description="Filter records up to this date (inclusive)",
            ),
            OpenApiParameter(
                name="status",
                type=OpenApiTypes.STR,
                enum=AttendanceRecord.Status.values,
                location=OpenApiParameter.QUERY,
                description="Filter by attendance status",
            ),
        ],
    ),
    retrieve=extend_schema(tags=["Attendance"]),
)
class AttendanceRecordViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    GenericViewSet,
):
    """Read access to attendance; employees only see their own records."""

    queryset = AttendanceRecord.objects.select_related("employee").all()
    serializer_class = AttendanceRecordSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        qs = super().get_queryset()
        u = self.request.user
        if not is_elevated(u, ATTENDANCE_VIEWER_ROLES):
            employee = getattr(u, "employee", None)
            if employee is None:
                return qs.none()
            qs = qs.filter(employee=employee)

        params = self.request.query_params
        if params.get("employee"):
            qs = qs.filter(employee_id=params["employee"])
        if params.get("start_date"):
            qs = qs.filter(date__gte=params["start_date"])
        if params.get("end_date"):
            qs = qs.filter(date__lte=params["end_date"])
        if params.get("status"):
            qs = qs.filter(status=params["status"].upper())
        return qs

    def _check_employee_scope(self, employee_id: int) -> None:
        u = self.request.user
        if is_elevated(u, ATTENDANCE_VIEWER_ROLES):
            return
        own = getattr(getattr(u, "employee", None), "pk", None)
        if own != employee_id:
            self.permission_denied(self.request, message="Forbidden")

    @extend_schema(
        tags=["Attendance"],
        parameters=[CascadeStatusQuerySerializer],
        responses=CascadeStatusSerializer,
    )
    @action(detail=False, methods=["get"], url_path="cascade-status")
    def cascade_status(self, request):
        """Whether a weekend absence was caused by a Friday/Monday absence."""
        ser = CascadeStatusQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        employee_id = ser.validated_data["employee"]
        self._check_employee_scope(employee_id)
        status = is_weekend_cascaded_absent(employee_id, ser.validated_data["date"])
        return Response(status.to_payload())

    @extend_schema(
        tags=["Attendance"],
        parameters=[CascadeRangeQuerySerializer],
        responses=CascadeAbsenceSerializer(many=True),
    )
    @action(detail=False, methods=["get"], url_path="cascade-absences")
    def cascade_absences(self, request):
        ser = CascadeRangeQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        employee_id = ser.validated_data["employee"]
        self._check_employee_scope(employee_id)
        absences = get_weekend_cascade_absences(
            employee_id,
            ser.validated_data["start_date"],
            ser.validated_data["end_date"],
        )
        return Response([item.to_payload() for item in absences])
