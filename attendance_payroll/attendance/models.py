from django.db import models
from django.utils.translation import gettext_lazy as _

from attendance_payroll.employees.models import Employee


class AttendanceRecord(models.Model):
    """One row per employee per calendar day.

    ``date`` carries no time of day; every lookup normalizes its input through
    :func:`attendance_payroll.attendance.calendar.normalize_day` first.
    """

    class Status(models.TextChoices):
        PRESENT = "PRESENT", _("Present")
        HALF_DAY = "HALF_DAY", _("Half day")
        ABSENT = "ABSENT", _("Absent")
        LEAVE = "LEAVE", _("Leave")
        WEEKEND = "WEEKEND", _("Weekend")
        HOLIDAY = "HOLIDAY", _("Holiday")

    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name="attendance_records"
    )
    date = models.DateField()
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.PRESENT,
    )
    punch_in = models.DateTimeField(blank=True, null=True)
    punch_out = models.DateTimeField(blank=True, null=True)
    total_hours = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    break_duration = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=0,
        help_text=_("Break time in hours."),
    )
    idle_time = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=0,
        help_text=_("Idle time in hours."),
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "employee_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["employee", "date"],
                name="attendance_unique_employee_date",
            ),
        ]
        indexes = [
            models.Index(fields=["date", "status"], name="attendance_date_status_idx"),
        ]

    def __str__(self):  # pragma: no cover - trivial
        return f"AttendanceRecord({self.employee_id}, {self.date}, {self.status})"

    @property
    def is_open(self) -> bool:
        """A punch-in without a punch-out is an active session."""
        return self.punch_in is not None and self.punch_out is None
