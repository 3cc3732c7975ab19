from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class AuditLog(models.Model):
    """Durable trail of bulk attendance and payroll mutations."""

    class Action(models.TextChoices):
        DAILY_ATTENDANCE_RUN = "attendance.daily_run", _("Daily attendance run")
        HOLIDAY_FIX = "attendance.holiday_fix", _("Holiday attendance fix")
        LEAVE_STATUS_CHANGED = "leave.status_changed", _("Leave status changed")
        PAYROLL_GENERATED = "payroll.generated", _("Payroll generated")
        PAYROLL_STATUS_CHANGED = "payroll.status_changed", _("Payroll status changed")
        PAYROLL_DELETED = "payroll.deleted", _("Payroll deleted")

    action = models.CharField(max_length=100, choices=Action.choices)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    message = models.TextField(blank=True)
    model_name = models.CharField(max_length=150, blank=True)
    record_id = models.BigIntegerField(null=True, blank=True)
    before = models.JSONField(null=True, blank=True)
    after = models.JSONField(null=True, blank=True)
    ip_address = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        who = self.actor_id or "system"
        return f"[{self.created_at}] {who}: {self.action}"
