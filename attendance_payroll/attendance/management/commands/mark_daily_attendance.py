from __future__ import annotations

import json

from django.core.management.base import BaseCommand
from django.core.management.base import CommandError
from django.core.management.base import CommandParser

from attendance_payroll.attendance.batch import run_daily_attendance
from attendance_payroll.attendance.batch import run_daily_attendance_range
from attendance_payroll.exceptions import ValidationError


class Command(BaseCommand):
    help = "Auto-mark attendance for yesterday, one day, or a range of days"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("--date", help="Target day (YYYY-MM-DD)")
        parser.add_argument("--start", help="First day of a backfill (YYYY-MM-DD)")
        parser.add_argument("--end", help="Last day of a backfill (YYYY-MM-DD)")
        parser.add_argument(
            "--time-budget",
            dest="time_budget",
            type=float,
            default=None,
            help="Stop each day's run after this many seconds",
        )

    def handle(self, *args, **options) -> None:
        start, end = options.get("start"), options.get("end")
        if bool(start) != bool(end):
            msg = "--start and --end must be given together"
            raise CommandError(msg)
        if start and options.get("date"):
            msg = "Use either --date or --start/--end"
            raise CommandError(msg)

        try:
            if start:
                results = run_daily_attendance_range(
                    start,
                    end,
                    time_budget_seconds=options["time_budget"],
                )
            else:
                results = [
                    run_daily_attendance(
                        options.get("date"),
                        time_budget_seconds=options["time_budget"],
                    ),
                ]
        except ValidationError as exc:
            raise CommandError(str(exc)) from exc

        failed = False
        for result in results:
            payload = result.to_payload()
            self.stdout.write(json.dumps(payload))
            failed = failed or not result.success
        if failed:
            msg = "Daily attendance run failed"
            raise CommandError(msg)
        self.stdout.write(self.style.SUCCESS(f"Processed {len(results)} day(s)"))
