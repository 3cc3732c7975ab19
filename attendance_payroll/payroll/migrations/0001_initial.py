import django.db.models.deletion
from decimal import Decimal

from django.db import migrations
from django.db import models


def _money(help_text=""):
    return models.DecimalField(
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=help_text,
        max_digits=12,
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("employees", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PayrollSetting",
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
                ("professional_tax", _money("Flat professional tax per payslip")),
                (
                    "tds_percentage",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("10.00"),
                        help_text="TDS as a percentage of gross salary",
                        max_digits=5,
                    ),
                ),
                (
                    "basic_percentage",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("70.00"),
                        help_text="Basic share of a VARIABLE salary",
                        max_digits=5,
                    ),
                ),
                (
                    "variable_percentage",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("30.00"),
                        help_text="Target-linked share of a VARIABLE salary",
                        max_digits=5,
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Payroll Setting",
                "verbose_name_plural": "Payroll Settings",
            },
        ),
        migrations.CreateModel(
            name="Payroll",
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
                ("month", models.PositiveSmallIntegerField()),
                ("year", models.PositiveSmallIntegerField()),
                ("total_days", models.PositiveSmallIntegerField(default=0)),
                ("weekend_days", models.PositiveSmallIntegerField(default=0)),
                ("working_days", models.PositiveSmallIntegerField(default=0)),
                (
                    "days_present",
                    models.DecimalField(
                        decimal_places=1,
                        default=Decimal("0.0"),
                        help_text="Effective paid days (half days count 0.5)",
                        max_digits=5,
                    ),
                ),
                ("half_days", models.PositiveSmallIntegerField(default=0)),
                (
                    "days_absent",
                    models.DecimalField(
                        decimal_places=1,
                        default=Decimal("0.0"),
                        max_digits=5,
                    ),
                ),
                ("basic_salary", _money()),
                ("variable_pay", _money()),
                (
                    "target_achievement",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Achieved share of the sales target, in percent",
                        max_digits=5,
                    ),
                ),
                ("basic_payable", _money()),
                ("variable_payable", _money()),
                ("gross_salary", _money()),
                ("professional_tax", _money()),
                ("tds", _money()),
                ("penalties", _money()),
                ("advance_payment", _money()),
                ("other_deductions", _money()),
                ("total_deductions", _money()),
                ("net_salary", _money()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("APPROVED", "Approved"),
                            ("PAID", "Paid"),
                        ],
                        default="PENDING",
                        max_length=10,
                    ),
                ),
                ("generated_at", models.DateTimeField(blank=True, null=True)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payrolls",
                        to="employees.employee",
                    ),
                ),
            ],
            options={
                "ordering": ["-year", "-month", "employee_id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("employee", "month", "year"),
                        name="payroll_unique_employee_month",
                    )
                ],
            },
        ),
    ]
