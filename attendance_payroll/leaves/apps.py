from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class LeavesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "attendance_payroll.leaves"
    verbose_name = _("Leaves")

    def ready(self):
        import attendance_payroll.leaves.signals  # noqa: F401, PLC0415
