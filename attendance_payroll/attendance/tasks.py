from celery import shared_task

from attendance_payroll.attendance.batch import run_daily_attendance
from attendance_payroll.attendance.holidays import fix_holiday_attendance


@shared_task(name="attendance.mark_daily_attendance")
def mark_daily_attendance(date_iso: str | None = None) -> dict:
    """Auto-mark attendance for one day.

    Args:
        date_iso: ISO date string (YYYY-MM-DD). Defaults to yesterday in TIME_ZONE.

    Returns:
        The run summary payload.
    """
    return run_daily_attendance(date_iso).to_payload()


@shared_task(name="attendance.fix_holiday_attendance")
def fix_holiday_attendance_task(
    start_iso: str | None = None,
    end_iso: str | None = None,
) -> dict:
    return fix_holiday_attendance(start_iso, end_iso).to_payload()
