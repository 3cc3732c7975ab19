from django.contrib import admin

from attendance_payroll.employees import models


@admin.register(models.Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "employee_id",
        "name",
        "department",
        "salary_type",
        "is_active",
    ]
    search_fields = ["employee_id", "name", "department", "user__email"]
    list_filter = ["is_active", "salary_type", "department", "date_of_joining"]
    raw_id_fields = ["user"]
