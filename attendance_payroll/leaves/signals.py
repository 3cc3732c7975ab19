import logging

from django.db.models.signals import post_save
from django.db.models.signals import pre_save
from django.dispatch import receiver

from .models import Leave
from .reconciler import ReconciliationOutcome
from .reconciler import handle_leave_status_change

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Leave)
def store_previous_state(sender, instance, **kwargs):
    previous = None
    if instance.pk:
        previous = (
            Leave.objects.filter(pk=instance.pk)
            .values("status", "start_date", "end_date")
            .first()
        )
    instance._previous_state = previous  # noqa: SLF001


@receiver(post_save, sender=Leave)
def reconcile_leave_attendance(sender, instance, created, raw=False, **kwargs):
    """Mark or revert attendance in the same transaction as the leave save."""
    if raw:
        return
    previous = getattr(instance, "_previous_state", None) or {}
    previous_status = previous.get("status")
    previous_start = previous.get("start_date")
    previous_end = previous.get("end_date")

    status_changed = previous_status != instance.status
    dates_changed = bool(previous) and (
        previous_start != instance.start_date or previous_end != instance.end_date
    )
    if not (status_changed or dates_changed):
        instance._reconciliation = ReconciliationOutcome()  # noqa: SLF001
        return

    outcome = handle_leave_status_change(
        instance.employee_id,
        instance.start_date,
        instance.end_date,
        instance.status,
        previous_status,
        previous_start=previous_start,
        previous_end=previous_end,
    )
    instance._reconciliation = outcome  # noqa: SLF001
    if outcome.action != "none":
        logger.info(
            "Leave %s %s -> %s: attendance %s",
            instance.pk,
            previous_status,
            instance.status,
            outcome.action,
        )
