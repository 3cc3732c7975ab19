from http import HTTPStatus

from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import permissions
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from attendance_payroll.employees.api.permissions import ROLE_ADMIN
from attendance_payroll.employees.api.permissions import ROLE_PAYROLL
from attendance_payroll.employees.api.permissions import IsAdminOrPayrollOnly
from attendance_payroll.employees.api.permissions import IsSelfEmployeeOrElevated
from attendance_payroll.employees.api.permissions import is_elevated
from attendance_payroll.payroll.api.serializers import GeneratePayrollSerializer
from attendance_payroll.payroll.api.serializers import PayrollSerializer
from attendance_payroll.payroll.api.serializers import PayrollSettingSerializer
from attendance_payroll.payroll.api.serializers import PayrollStatusSerializer
from attendance_payroll.payroll.models import Payroll
from attendance_payroll.payroll.models import PayrollSetting
from attendance_payroll.payroll.services import delete_payroll
from attendance_payroll.payroll.services import generate_payroll_for_month
from attendance_payroll.payroll.services import set_payroll_status

PAYROLL_ROLES = (ROLE_ADMIN, ROLE_PAYROLL)


@extend_schema_view(
    list=extend_schema(tags=["Payroll"]),
    retrieve=extend_schema(tags=["Payroll"]),
    destroy=extend_schema(tags=["Payroll"]),
)
class PayrollViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Payroll records; employees see only their own payslips."""

    serializer_class = PayrollSerializer
    permission_classes = [permissions.IsAuthenticated, IsSelfEmployeeOrElevated]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_permissions(self):
        if getattr(self, "action", None) in {"generate", "partial_update", "destroy"}:
            return [permissions.IsAuthenticated(), IsAdminOrPayrollOnly()]
        return super().get_permissions()

    def get_queryset(self):
        qs = Payroll.objects.select_related("employee")
        user = self.request.user
        if not is_elevated(user, PAYROLL_ROLES):
            employee = getattr(user, "employee", None)
            if employee is None:
                return qs.none()
            qs = qs.filter(employee=employee)
        params = self.request.query_params
        if params.get("employee"):
            qs = qs.filter(employee_id=params["employee"])
        if params.get("month"):
            qs = qs.filter(month=params["month"])
        if params.get("year"):
            qs = qs.filter(year=params["year"])
        if params.get("status"):
            qs = qs.filter(status=params["status"].upper())
        return qs

    @extend_schema(
        tags=["Payroll"],
        request=PayrollStatusSerializer,
        responses=PayrollSerializer,
    )
    def partial_update(self, request, *args, **kwargs):
        payroll = self.get_object()
        ser = PayrollStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        payroll = set_payroll_status(
            payroll,
            ser.validated_data["status"],
            actor=request.user,
        )
        return Response(PayrollSerializer(payroll).data)

    def perform_destroy(self, instance):
        delete_payroll(instance, actor=self.request.user)

    @extend_schema(tags=["Payroll"], request=GeneratePayrollSerializer)
    @action(detail=False, methods=["post"], url_path="generate")
    def generate(self, request):
        """Generate (or recompute drafts of) a month's payroll."""
        ser = GeneratePayrollSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        result = generate_payroll_for_month(
            data["month"],
            data["year"],
            data.get("employee_ids"),
            adjustments=ser.adjustments_by_employee(),
            actor=request.user,
        )
        http_status = HTTPStatus.OK
        if not result.success:
            http_status = HTTPStatus.INTERNAL_SERVER_ERROR
        return Response(result.to_payload(), status=http_status)


class PayrollSettingView(APIView):
    """Read or replace the global payroll configuration."""

    permission_classes = [permissions.IsAuthenticated, IsAdminOrPayrollOnly]

    @extend_schema(tags=["Payroll Settings"], responses=PayrollSettingSerializer)
    def get(self, request):
        return Response(PayrollSettingSerializer(PayrollSetting.load()).data)

    @extend_schema(
        tags=["Payroll Settings"],
        request=PayrollSettingSerializer,
        responses=PayrollSettingSerializer,
    )
    def put(self, request):
        setting = PayrollSetting.load()
        ser = PayrollSettingSerializer(setting, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        ser.save()
        return Response(ser.data)
