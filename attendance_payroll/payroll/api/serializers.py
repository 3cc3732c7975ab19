from decimal import Decimal

from rest_framework import serializers

from attendance_payroll.payroll.calculator import Adjustments
from attendance_payroll.payroll.models import Payroll
from attendance_payroll.payroll.models import PayrollSetting


class PayrollSettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = PayrollSetting
        fields = [
            "professional_tax",
            "tds_percentage",
            "basic_percentage",
            "variable_percentage",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]

    def validate(self, attrs):
        basic = attrs.get(
            "basic_percentage",
            getattr(self.instance, "basic_percentage", None),
        )
        variable = attrs.get(
            "variable_percentage",
            getattr(self.instance, "variable_percentage", None),
        )
        if basic is not None and variable is not None and basic + variable != 100:
            raise serializers.ValidationError(
                "Basic and variable percentages must add up to 100.",
            )
        return attrs


class PayrollSerializer(serializers.ModelSerializer):
    employee_code = serializers.CharField(source="employee.employee_id", read_only=True)
    employee_name = serializers.CharField(source="employee.name", read_only=True)

    class Meta:
        model = Payroll
        fields = [
            "id",
            "employee",
            "employee_code",
            "employee_name",
            "month",
            "year",
            "total_days",
            "weekend_days",
            "working_days",
            "days_present",
            "half_days",
            "days_absent",
            "basic_salary",
            "variable_pay",
            "target_achievement",
            "basic_payable",
            "variable_payable",
            "gross_salary",
            "professional_tax",
            "tds",
            "penalties",
            "advance_payment",
            "other_deductions",
            "total_deductions",
            "net_salary",
            "status",
            "generated_at",
            "paid_at",
        ]
        read_only_fields = fields


class PayrollStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Payroll.Status.choices)


class AdjustmentsSerializer(serializers.Serializer):
    employee = serializers.IntegerField()
    penalties = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal(0),
        default=Decimal(0),
    )
    advance_payment = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal(0),
        default=Decimal(0),
    )
    other_deductions = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal(0),
        default=Decimal(0),
    )
    target_achievement = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal(0),
        default=Decimal(0),
    )

    def to_adjustments(self, data) -> Adjustments:
        return Adjustments(
            penalties=data["penalties"],
            advance_payment=data["advance_payment"],
            other_deductions=data["other_deductions"],
            target_achievement=data["target_achievement"],
        )


class GeneratePayrollSerializer(serializers.Serializer):
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=2000, max_value=9999)
    employee_ids = serializers.ListField(
        child=serializers.IntegerField(),
        required=False,
        allow_empty=False,
    )
    adjustments = AdjustmentsSerializer(many=True, required=False)

    def adjustments_by_employee(self) -> dict[int, Adjustments]:
        helper = AdjustmentsSerializer()
        return {
            item["employee"]: helper.to_adjustments(item)
            for item in self.validated_data.get("adjustments", [])
        }
