from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _


def _money_field(help_text=""):
    return models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=help_text,
    )


class PayrollSetting(models.Model):
    """Global payroll configuration (singleton pattern)."""

    professional_tax = _money_field(_("Flat professional tax per payslip"))
    tds_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("10.00"),
        help_text=_("TDS as a percentage of gross salary"),
    )
    basic_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("70.00"),
        help_text=_("Basic share of a VARIABLE salary"),
    )
    variable_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("30.00"),
        help_text=_("Target-linked share of a VARIABLE salary"),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payroll Setting")
        verbose_name_plural = _("Payroll Settings")

    def __str__(self):  # pragma: no cover - trivial
        return f"Payroll Settings (TDS {self.tds_percentage}%)"

    def clean(self):
        if self.basic_percentage + self.variable_percentage != Decimal(100):
            raise ValidationError(
                _("Basic and variable percentages must add up to 100."),
            )

    def save(self, *args, **kwargs):
        # Ensure only one settings object exists (singleton pattern)
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "PayrollSetting":
        """Return the singleton, seeding it from Django settings on first use."""
        obj, _created = cls.objects.get_or_create(
            pk=1,
            defaults={
                "professional_tax": Decimal(
                    str(getattr(settings, "PAYROLL_PROFESSIONAL_TAX", "200")),
                ),
                "tds_percentage": Decimal(
                    str(getattr(settings, "PAYROLL_TDS_PERCENTAGE", "10")),
                ),
                "basic_percentage": Decimal(
                    str(getattr(settings, "PAYROLL_BASIC_PERCENTAGE", "70")),
                ),
                "variable_percentage": Decimal(
                    str(getattr(settings, "PAYROLL_VARIABLE_PERCENTAGE", "30")),
                ),
            },
        )
        return obj


class Payroll(models.Model):
    """One computed payslip per employee per calendar month."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        APPROVED = "APPROVED", _("Approved")
        PAID = "PAID", _("Paid")

    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="payrolls",
    )
    month = models.PositiveSmallIntegerField()
    year = models.PositiveSmallIntegerField()

    total_days = models.PositiveSmallIntegerField(default=0)
    weekend_days = models.PositiveSmallIntegerField(default=0)
    working_days = models.PositiveSmallIntegerField(default=0)
    days_present = models.DecimalField(
        max_digits=5,
        decimal_places=1,
        default=Decimal("0.0"),
        help_text=_("Effective paid days (half days count 0.5)"),
    )
    half_days = models.PositiveSmallIntegerField(default=0)
    days_absent = models.DecimalField(
        max_digits=5,
        decimal_places=1,
        default=Decimal("0.0"),
    )

    basic_salary = _money_field()
    variable_pay = _money_field()
    target_achievement = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Achieved share of the sales target, in percent"),
    )
    basic_payable = _money_field()
    variable_payable = _money_field()
    gross_salary = _money_field()

    professional_tax = _money_field()
    tds = _money_field()
    penalties = _money_field()
    advance_payment = _money_field()
    other_deductions = _money_field()
    total_deductions = _money_field()
    net_salary = _money_field()

    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.PENDING,
    )
    generated_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-year", "-month", "employee_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["employee", "month", "year"],
                name="payroll_unique_employee_month",
            ),
        ]

    def __str__(self):  # pragma: no cover - trivial
        return f"Payroll({self.employee_id}, {self.year}-{self.month:02d})"

    @property
    def is_locked(self) -> bool:
        return self.status == self.Status.PAID
