from rest_framework import serializers

from attendance_payroll.attendance.models import AttendanceRecord


class AttendanceRecordSerializer(serializers.ModelSerializer):
    employee_code = serializers.CharField(source="employee.employee_id", read_only=True)
    employee_name = serializers.CharField(source="employee.name", read_only=True)
    is_open = serializers.BooleanField(read_only=True)

    class Meta:
        model = AttendanceRecord
        fields = [
            "id",
            "employee",
            "employee_code",
            "employee_name",
            "date",
            "status",
            "punch_in",
            "punch_out",
            "total_hours",
            "break_duration",
            "idle_time",
            "is_open",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class DailyRunRequestSerializer(serializers.Serializer):
    date = serializers.DateField(required=False, allow_null=True)


class DateRangeSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and end < start:
            raise serializers.ValidationError(
                {"end_date": "End date cannot be before start date"},
            )
        return attrs


class CascadeStatusQuerySerializer(serializers.Serializer):
    employee = serializers.IntegerField()
    date = serializers.DateField()


class CascadeRangeQuerySerializer(DateRangeSerializer):
    employee = serializers.IntegerField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()


class CascadeStatusSerializer(serializers.Serializer):
    isCascaded = serializers.BooleanField()  # noqa: N815
    reason = serializers.CharField(allow_null=True)


class CascadeAbsenceSerializer(serializers.Serializer):
    date = serializers.DateField()
    reason = serializers.CharField()
