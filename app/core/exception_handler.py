"""
DRF exception handler for application errors.

Renders BaseApplicationError subclasses with their to_dict() payload and
status_code, and defers everything else to DRF's default handler.

Configuration (settings.py):
    REST_FRAMEWORK = {
        "EXCEPTION_HANDLER": "core.exception_handler.application_exception_handler",
    }
"""

from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError

logger = logging.getLogger(__name__)


def application_exception_handler(exc, context):
    """
    Convert application errors into DRF responses.

    Args:
        exc: The raised exception
        context: DRF handler context (view, request, ...)

    Returns:
        Response for handled exceptions, None to let Django raise a 500
    """
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            f"{type(exc).__name__} in {type(view).__name__ if view else 'unknown view'}",
            extra={"error_code": exc.error_code},
        )
        return Response(exc.to_dict(), status=exc.status_code)

    return exception_handler(exc, context)
