"""Leave status changes with synchronous attendance reconciliation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction

from attendance_payroll.attendance.calendar import day_range
from attendance_payroll.audit.models import AuditLog
from attendance_payroll.audit.utils import log_action
from attendance_payroll.exceptions import NotFoundError
from attendance_payroll.exceptions import ValidationError

from .models import Leave
from .reconciler import ReconciliationOutcome

logger = logging.getLogger(__name__)

Status = Leave.Status

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    Status.PENDING: frozenset(
        {Status.APPROVED, Status.REJECTED, Status.HOLD, Status.CANCELLED},
    ),
    Status.HOLD: frozenset(
        {Status.PENDING, Status.APPROVED, Status.REJECTED, Status.CANCELLED},
    ),
    Status.APPROVED: frozenset({Status.REJECTED, Status.CANCELLED}),
    Status.REJECTED: frozenset(),
    Status.CANCELLED: frozenset(),
}


@dataclass
class LeaveStatusChange:
    leave: Leave
    previous_status: str
    reconciliation: ReconciliationOutcome


def _snapshot(leave: Leave) -> dict:
    return {
        "status": leave.status,
        "start_date": leave.start_date.isoformat(),
        "end_date": leave.end_date.isoformat(),
        "days": leave.days,
    }


def change_leave_status(  # noqa: PLR0913
    leave: Leave,
    new_status: str,
    *,
    actor=None,
    admin_comment: str | None = None,
    start_date=None,
    end_date=None,
    ip_address: str = "",
) -> LeaveStatusChange:
    """Move ``leave`` to ``new_status`` and reconcile attendance atomically.

    Either the leave update and every attendance write commit together, or
    nothing does. ``start_date``/``end_date`` optionally move the leave in
    the same step; ``days`` is recomputed from them.
    """
    if new_status not in Status.values:
        msg = f"Unknown leave status: {new_status!r}"
        raise ValidationError(msg)

    with transaction.atomic():
        try:
            locked = Leave.objects.select_for_update().get(pk=leave.pk)
        except Leave.DoesNotExist:
            msg = f"Leave {leave.pk} not found"
            raise NotFoundError(msg) from None

        current = locked.status
        if not ALLOWED_TRANSITIONS[current]:
            msg = f"Leave is {current} and can no longer change"
            raise ValidationError(msg)
        if new_status != current and new_status not in ALLOWED_TRANSITIONS[current]:
            msg = f"Cannot move leave from {current} to {new_status}"
            raise ValidationError(msg)

        first, last = day_range(
            start_date or locked.start_date,
            end_date or locked.end_date,
        )
        before = _snapshot(locked)
        locked.status = new_status
        locked.start_date = first
        locked.end_date = last
        if admin_comment is not None:
            locked.admin_comment = admin_comment
        # post_save reconciles attendance inside this transaction.
        locked.save()
        outcome = getattr(locked, "_reconciliation", None) or ReconciliationOutcome()

        log_action(
            AuditLog.Action.LEAVE_STATUS_CHANGED,
            actor=actor,
            message=f"Leave {locked.pk}: {current} -> {new_status}",
            model_name="leaves.Leave",
            record_id=locked.pk,
            before=before,
            after={**_snapshot(locked), "attendance": outcome.to_payload()},
            ip_address=ip_address,
        )

    logger.info(
        "Leave %s for employee %s moved %s -> %s (%s)",
        locked.pk,
        locked.employee_id,
        current,
        new_status,
        outcome.action,
    )
    return LeaveStatusChange(
        leave=locked,
        previous_status=current,
        reconciliation=outcome,
    )
