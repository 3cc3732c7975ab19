from django.contrib import admin

from attendance_payroll.attendance import models


@admin.register(models.AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    list_display = ["id", "employee", "date", "status", "punch_in", "punch_out"]
    search_fields = ["employee__employee_id", "employee__name", "notes"]
    list_filter = ["status", "date", "created_at"]
    raw_id_fields = ["employee"]
    date_hierarchy = "date"
