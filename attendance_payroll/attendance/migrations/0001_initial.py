import django.db.models.deletion
from django.db import migrations
from django.db import models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("employees", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="AttendanceRecord",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("date", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PRESENT", "Present"),
                            ("HALF_DAY", "Half day"),
                            ("ABSENT", "Absent"),
                            ("LEAVE", "Leave"),
                            ("WEEKEND", "Weekend"),
                            ("HOLIDAY", "Holiday"),
                        ],
                        default="PRESENT",
                        max_length=10,
                    ),
                ),
                ("punch_in", models.DateTimeField(blank=True, null=True)),
                ("punch_out", models.DateTimeField(blank=True, null=True)),
                (
                    "total_hours",
                    models.DecimalField(decimal_places=2, default=0, max_digits=5),
                ),
                (
                    "break_duration",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        help_text="Break time in hours.",
                        max_digits=5,
                    ),
                ),
                (
                    "idle_time",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        help_text="Idle time in hours.",
                        max_digits=5,
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendance_records",
                        to="employees.employee",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "employee_id"],
                "indexes": [
                    models.Index(
                        fields=["date", "status"],
                        name="attendance_date_status_idx",
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("employee", "date"),
                        name="attendance_unique_employee_date",
                    )
                ],
            },
        ),
    ]
