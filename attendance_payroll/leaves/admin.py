from django.contrib import admin

from attendance_payroll.leaves import models


@admin.register(models.Holiday)
class HolidayAdmin(admin.ModelAdmin):
    list_display = ["id", "date", "name", "is_optional"]
    search_fields = ["name"]
    list_filter = ["is_optional", "date"]


@admin.register(models.Leave)
class LeaveAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "employee",
        "leave_type",
        "start_date",
        "end_date",
        "days",
        "status",
    ]
    search_fields = ["employee__employee_id", "employee__name", "reason"]
    list_filter = ["status", "leave_type", "start_date"]
    raw_id_fields = ["employee"]
    readonly_fields = ["days"]
