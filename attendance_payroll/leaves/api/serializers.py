from rest_framework import serializers

from attendance_payroll.leaves.models import Holiday
from attendance_payroll.leaves.models import Leave


class HolidaySerializer(serializers.ModelSerializer):
    class Meta:
        model = Holiday
        fields = ["id", "date", "name", "is_optional", "created_at"]
        read_only_fields = ["created_at"]


class LeaveSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.name", read_only=True)

    class Meta:
        model = Leave
        fields = [
            "id",
            "employee",
            "employee_name",
            "leave_type",
            "start_date",
            "end_date",
            "days",
            "reason",
            "admin_comment",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "days",
            "admin_comment",
            "status",
            "created_at",
            "updated_at",
        ]
        extra_kwargs = {"employee": {"required": False}}

    def validate(self, attrs):
        start = attrs.get("start_date")
        end = attrs.get("end_date")
        if start and end and end < start:
            raise serializers.ValidationError(
                {"end_date": "End date cannot be before start date"},
            )
        return attrs


class LeaveStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Leave.Status.choices)
    admin_comment = serializers.CharField(required=False, allow_blank=True)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class ReconciliationSerializer(serializers.Serializer):
    action = serializers.CharField()
    created = serializers.IntegerField()
    updated = serializers.IntegerField()
    reverted = serializers.IntegerField()


class LeaveStatusResponseSerializer(serializers.Serializer):
    leave = LeaveSerializer()
    previous_status = serializers.CharField()
    attendance = ReconciliationSerializer()
