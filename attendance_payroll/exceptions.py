"""Engine error taxonomy and its translation to API responses."""

from __future__ import annotations

import logging
from http import HTTPStatus

from django.db import DatabaseError
from django.db import IntegrityError
from rest_framework.response import Response
from rest_framework.views import exception_handler
from rest_framework.views import set_rollback

logger = logging.getLogger(__name__)


class EngineError(Exception):
    """Base class for attendance and payroll engine failures."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    code = "engine_error"


class ValidationError(EngineError):
    """Malformed input such as a reversed date range or an illegal transition."""

    status_code = HTTPStatus.BAD_REQUEST
    code = "invalid"


class NotFoundError(EngineError):
    status_code = HTTPStatus.NOT_FOUND
    code = "not_found"


class ConflictError(EngineError):
    """A uniqueness rule was hit; callers treat it as "already exists"."""

    status_code = HTTPStatus.CONFLICT
    code = "conflict"


class StoreError(EngineError):
    """The database could not be read or written."""

    status_code = HTTPStatus.SERVICE_UNAVAILABLE
    code = "store_unavailable"


def api_exception_handler(exc, context):
    """DRF exception handler that also understands :class:`EngineError`.

    Uncaught database errors surface as ``ConflictError`` (integrity) or
    ``StoreError`` (anything else) instead of a bare 500.
    """
    if isinstance(exc, IntegrityError):
        exc = ConflictError(str(exc))
    elif isinstance(exc, DatabaseError):
        exc = StoreError(str(exc))
    if isinstance(exc, EngineError):
        if isinstance(exc, StoreError):
            logger.error("Store failure in %s: %s", context.get("view"), exc)
        set_rollback()
        return Response(
            {"success": False, "code": exc.code, "detail": str(exc)},
            status=exc.status_code,
        )
    return exception_handler(exc, context)
