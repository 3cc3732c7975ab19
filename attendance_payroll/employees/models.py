from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Employee(models.Model):
    class SalaryType(models.TextChoices):
        FIXED = "FIXED", _("Fixed")
        VARIABLE = "VARIABLE", _("Variable")

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="employee"
    )
    employee_id = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=255)
    department = models.CharField(max_length=100, blank=True)
    date_of_joining = models.DateField(
        blank=True,
        null=True,
        help_text=_("Attendance is never auto-marked before this date."),
    )
    is_active = models.BooleanField(default=True)
    salary = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        help_text=_("Monthly gross salary."),
    )
    salary_type = models.CharField(
        max_length=10,
        choices=SalaryType.choices,
        default=SalaryType.FIXED,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["employee_id"]

    def __str__(self):  # pragma: no cover - trivial
        return f"Employee({self.employee_id})"

    def joined_by(self, day) -> bool:
        return self.date_of_joining is None or self.date_of_joining <= day
