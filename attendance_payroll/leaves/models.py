from django.core.exceptions import ValidationError
from django.db import models
from django.db import transaction
from django.utils.translation import gettext_lazy as _


class Holiday(models.Model):
    date = models.DateField(unique=True)
    name = models.CharField(max_length=150)
    is_optional = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["date"]

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.name} ({self.date})"


class Leave(models.Model):
    class LeaveType(models.TextChoices):
        CASUAL = "CASUAL", _("Casual")
        SICK = "SICK", _("Sick")
        EARNED = "EARNED", _("Earned")
        UNPAID = "UNPAID", _("Unpaid")
        OTHER = "OTHER", _("Other")

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        APPROVED = "APPROVED", _("Approved")
        REJECTED = "REJECTED", _("Rejected")
        HOLD = "HOLD", _("On hold")
        CANCELLED = "CANCELLED", _("Cancelled")

    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="leaves",
    )
    leave_type = models.CharField(
        max_length=10,
        choices=LeaveType.choices,
        default=LeaveType.CASUAL,
    )
    start_date = models.DateField()
    end_date = models.DateField()
    days = models.PositiveIntegerField(
        default=0,
        help_text=_("Calendar days covered, both ends inclusive."),
    )
    reason = models.TextField(blank=True, default="")
    admin_comment = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.PENDING,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date", "-id"]

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.employee} {self.leave_type} {self.start_date}..{self.end_date}"

    def clean(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError(_("Start date cannot be after end date."))

    def compute_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def save(self, *args, **kwargs):
        if self.start_date and self.end_date and self.start_date <= self.end_date:
            self.days = self.compute_days()
        # post_save reconciles attendance; both commit or roll back together.
        with transaction.atomic():
            super().save(*args, **kwargs)
