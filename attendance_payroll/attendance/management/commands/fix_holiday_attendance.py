from __future__ import annotations

from django.core.management.base import BaseCommand
from django.core.management.base import CommandError
from django.core.management.base import CommandParser

from attendance_payroll.attendance.holidays import fix_holiday_attendance
from attendance_payroll.exceptions import ValidationError


class Command(BaseCommand):
    help = "Turn ABSENT records on declared holidays into HOLIDAY"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("--start", help="First holiday date to check (YYYY-MM-DD)")
        parser.add_argument("--end", help="Last holiday date to check (YYYY-MM-DD)")

    def handle(self, *args, **options) -> None:
        try:
            result = fix_holiday_attendance(options.get("start"), options.get("end"))
        except ValidationError as exc:
            raise CommandError(str(exc)) from exc

        for item in result.details:
            self.stdout.write(f"{item.date} {item.holiday}: {item.count} fixed")
        self.stdout.write(
            self.style.SUCCESS(f"Fixed {result.total_fixed} attendance records"),
        )
