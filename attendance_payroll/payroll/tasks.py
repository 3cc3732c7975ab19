from celery import shared_task

from attendance_payroll.payroll.services import generate_payroll_for_month
from attendance_payroll.payroll.services import previous_month


@shared_task(name="payroll.generate_monthly_payroll")
def generate_monthly_payroll(month: int | None = None, year: int | None = None) -> dict:
    """Generate payroll for every active employee; defaults to last month."""
    if month is None or year is None:
        month, year = previous_month()
    return generate_payroll_for_month(month, year).to_payload()
