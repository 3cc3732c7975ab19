from django.contrib import admin

from attendance_payroll.payroll import models


@admin.register(models.PayrollSetting)
class PayrollSettingAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "professional_tax",
        "tds_percentage",
        "basic_percentage",
        "variable_percentage",
    ]

    def has_add_permission(self, request):
        return not models.PayrollSetting.objects.exists()


@admin.register(models.Payroll)
class PayrollAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "employee",
        "month",
        "year",
        "gross_salary",
        "net_salary",
        "status",
    ]
    search_fields = ["employee__employee_id", "employee__name"]
    list_filter = ["status", "year", "month"]
    raw_id_fields = ["employee"]
