"""Liveness probe for the API, the Celery broker and the nightly attendance batch."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

import redis
from django.conf import settings
from django.db import connection
from django.db import transaction
from django.http import JsonResponse

from attendance_payroll.audit.models import AuditLog


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


def check_broker() -> dict[str, Any]:
    url = getattr(settings, "CELERY_BROKER_URL", None) or getattr(
        settings,
        "REDIS_URL",
        None,
    )
    if not url:
        return {"ok": False, "error": "No broker URL configured"}
    try:
        redis.Redis.from_url(
            url,
            socket_timeout=0.5,
            socket_connect_timeout=0.5,
        ).ping()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


def last_attendance_run() -> str | None:
    """Timestamp of the latest daily attendance run, if the store answers."""
    try:
        entry = (
            AuditLog.objects.filter(action=AuditLog.Action.DAILY_ATTENDANCE_RUN)
            .order_by("-created_at")
            .values_list("created_at", flat=True)
            .first()
        )
    except Exception:  # noqa: BLE001
        return None
    return entry.isoformat() if entry else None


@transaction.non_atomic_requests
def health(request):
    components = {"db": check_db(), "redis": check_broker()}
    healthy = [part["ok"] for part in components.values()]

    if all(healthy):
        status, http_status = "ok", HTTPStatus.OK
    else:
        status = "degraded" if any(healthy) else "down"
        http_status = HTTPStatus.SERVICE_UNAVAILABLE

    payload = {"status": status, "components": components}
    if components["db"]["ok"]:
        payload["lastAttendanceRun"] = last_attendance_run()
    return JsonResponse(payload, status=http_status)
