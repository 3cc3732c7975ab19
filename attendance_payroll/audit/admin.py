from django.contrib import admin

from attendance_payroll.audit import models


@admin.register(models.AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ["id", "action", "actor", "model_name", "record_id", "created_at"]
    search_fields = ["message", "model_name", "ip_address"]
    list_filter = ["action", "created_at"]
    readonly_fields = [
        "action",
        "actor",
        "message",
        "model_name",
        "record_id",
        "before",
        "after",
        "ip_address",
        "created_at",
    ]
