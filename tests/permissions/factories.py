"""Builders for the role matrix: one login plus payroll-ready employee per role."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group

from attendance_payroll.employees.models import Employee

if TYPE_CHECKING:
    from collections.abc import Iterable

User = get_user_model()

# Joined well before any month the matrix generates payroll or attendance for.
JOINED = dt.date(2023, 1, 2)


@dataclass
class RoleContext:
    user: User
    employee: Employee


def ensure_groups(names: Iterable[str]) -> None:
    for name in names:
        Group.objects.get_or_create(name=name)


def create_user_with_role(
    username: str,
    *,
    groups: Iterable[str] | None = None,
    is_staff: bool = False,
    department: str = "",
    salary: Decimal = Decimal("30000.00"),
) -> RoleContext:
    """Employee ``username.upper()`` on a fixed salary, member of ``groups``."""
    group_names = list(groups or [])
    ensure_groups(group_names)
    user = User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="TestPass123!",  # noqa: S106
        is_staff=is_staff,
    )
    user.groups.add(*Group.objects.filter(name__in=group_names))
    employee = Employee.objects.create(
        user=user,
        employee_id=username.upper(),
        name=username.replace("_", " ").title(),
        department=department,
        salary=salary,
        salary_type=Employee.SalaryType.FIXED,
        date_of_joining=JOINED,
        is_active=True,
    )
    return RoleContext(user=user, employee=employee)
