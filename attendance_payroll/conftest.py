import datetime as dt
import itertools
from decimal import Decimal

import pytest
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from attendance_payroll.employees.models import Employee
from attendance_payroll.users.models import User

_seq = itertools.count(1)


@pytest.fixture
def make_employee(db):
    """Factory for an active employee with its own login."""

    def _make(  # noqa: PLR0913
        *,
        name: str | None = None,
        salary: str | Decimal = "30000.00",
        salary_type: str = Employee.SalaryType.FIXED,
        date_of_joining: dt.date | None = None,
        is_active: bool = True,
        groups: tuple[str, ...] = (),
        is_staff: bool = False,
    ) -> Employee:
        n = next(_seq)
        user = User.objects.create_user(
            username=f"user{n}",
            email=f"user{n}@example.com",
            password="TestPass123!",  # noqa: S106
            is_staff=is_staff,
        )
        for group_name in groups:
            group, _ = Group.objects.get_or_create(name=group_name)
            user.groups.add(group)
        return Employee.objects.create(
            user=user,
            employee_id=f"EMP{n:04d}",
            name=name or f"Employee {n}",
            salary=Decimal(salary),
            salary_type=salary_type,
            date_of_joining=date_of_joining,
            is_active=is_active,
        )

    return _make


@pytest.fixture
def employee(make_employee) -> Employee:
    return make_employee(name="Asha Rao")


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()
