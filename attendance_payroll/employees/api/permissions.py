"""Role-based permission classes shared by the attendance, leave and payroll APIs."""

from collections.abc import Iterable
from typing import Any

from django.conf import settings
from django.utils.crypto import constant_time_compare
from rest_framework.permissions import SAFE_METHODS
from rest_framework.permissions import BasePermission

ROLE_ADMIN = "Admin"
ROLE_MANAGER = "Manager"
ROLE_PAYROLL = "Payroll"
ROLE_LINE_MANAGER = "Line Manager"
ROLE_EMPLOYEE = "Employee"


def _user_in_groups(user, names: Iterable[str]) -> bool:
    groups = getattr(user, "groups", None)
    names_list = list(names)
    if not groups or not names_list:
        return False
    return groups.filter(name__in=names_list).exists()


def _is_staff_or_role(user, roles: Iterable[str]) -> bool:
    return bool(getattr(user, "is_staff", False)) or _user_in_groups(user, roles)


def _is_authenticated(user) -> bool:
    return bool(user and getattr(user, "is_authenticated", False))


def _is_self_employee(user, obj: Any) -> bool:
    employee = getattr(obj, "employee", None)
    if employee is None:
        return False
    return getattr(employee, "user_id", None) == getattr(user, "id", None)


def is_elevated(user, roles: Iterable[str] = (ROLE_ADMIN, ROLE_MANAGER)) -> bool:
    """True for staff users or members of any of ``roles``."""
    return _is_authenticated(user) and _is_staff_or_role(user, roles)


def bearer_token(request) -> str:
    header = request.META.get("HTTP_AUTHORIZATION", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


class _RolePermission(BasePermission):
    """Base helper to gate access by role names."""

    allowed_roles: tuple[str, ...] = ()
    allow_staff: bool = True

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not _is_authenticated(user):
            return False
        if self.allow_staff and getattr(user, "is_staff", False):
            return True
        return _user_in_groups(user, self.allowed_roles)


class IsAdminOnly(_RolePermission):
    allowed_roles = (ROLE_ADMIN,)


class IsAdminOrManagerOnly(_RolePermission):
    """Allow access only to Admin/Manager/Staff users."""

    allowed_roles = (ROLE_ADMIN, ROLE_MANAGER)


class IsAdminOrPayrollOnly(_RolePermission):
    """Restrict access to Admin/Payroll roles (with staff overrides)."""

    allowed_roles = (ROLE_ADMIN, ROLE_PAYROLL)


class IsLeaveApprover(_RolePermission):
    allowed_roles = (ROLE_ADMIN, ROLE_MANAGER, ROLE_LINE_MANAGER)


class IsAdminOrManagerCanWrite(BasePermission):
    def has_permission(self, request, view):
        u = getattr(request, "user", None)
        if not _is_authenticated(u):
            return False
        if request.method in SAFE_METHODS:
            return True
        return _is_staff_or_role(u, [ROLE_ADMIN, ROLE_MANAGER])


class IsSelfEmployeeOrElevated(BasePermission):
    """Object access for the record's own employee or Admin/Manager/Payroll."""

    elevated_roles = (ROLE_ADMIN, ROLE_MANAGER, ROLE_PAYROLL)

    def has_object_permission(self, request, view, obj):
        u = request.user
        if not _is_authenticated(u):
            return False
        if _is_staff_or_role(u, self.elevated_roles):
            return True
        return _is_self_employee(u, obj)


class HasCronSecretOrIsAdmin(BasePermission):
    """Scheduler callers present ``Authorization: Bearer <ATTENDANCE_CRON_SECRET>``.

    Interactive callers must be staff or in the Admin group. An empty
    configured secret disables the bearer path entirely.
    """

    message = "Unauthorized"

    def has_permission(self, request, view) -> bool:
        secret = getattr(settings, "ATTENDANCE_CRON_SECRET", "")
        token = bearer_token(request)
        if secret and token and constant_time_compare(token, secret):
            return True
        return is_elevated(getattr(request, "user", None), (ROLE_ADMIN,))
