from __future__ import annotations

import json

from django.core.management.base import BaseCommand
from django.core.management.base import CommandError
from django.core.management.base import CommandParser

from attendance_payroll.payroll.services import generate_payroll_for_month
from attendance_payroll.payroll.services import previous_month


class Command(BaseCommand):
    help = "Generate monthly payroll from attendance (defaults to last month)"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("--month", type=int, help="Month number (1-12)")
        parser.add_argument("--year", type=int, help="Four digit year")
        parser.add_argument(
            "--employee",
            dest="employees",
            action="append",
            type=int,
            help="Employee primary key; repeat to select several",
        )

    def handle(self, *args, **options) -> None:
        month, year = options.get("month"), options.get("year")
        if (month is None) != (year is None):
            msg = "--month and --year must be given together"
            raise CommandError(msg)
        if month is None:
            month, year = previous_month()
        if not 1 <= month <= 12:  # noqa: PLR2004
            msg = f"Invalid month: {month}"
            raise CommandError(msg)

        result = generate_payroll_for_month(month, year, options.get("employees"))
        self.stdout.write(json.dumps(result.to_payload()))
        if not result.success:
            msg = "Payroll generation failed"
            raise CommandError(msg)
        self.stdout.write(
            self.style.SUCCESS(
                f"Payroll {year}-{month:02d}: {result.created} created, "
                f"{result.updated} updated",
            ),
        )
