import django.db.models.deletion
from django.conf import settings
from django.db import migrations
from django.db import models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Employee",
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
                ("employee_id", models.CharField(max_length=50, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("department", models.CharField(blank=True, max_length=100)),
                (
                    "date_of_joining",
                    models.DateField(
                        blank=True,
                        help_text="Attendance is never auto-marked before this date.",
                        null=True,
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                (
                    "salary",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        help_text="Monthly gross salary.",
                        max_digits=12,
                    ),
                ),
                (
                    "salary_type",
                    models.CharField(
                        choices=[("FIXED", "Fixed"), ("VARIABLE", "Variable")],
                        default="FIXED",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="employee",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["employee_id"],
            },
        ),
    ]
