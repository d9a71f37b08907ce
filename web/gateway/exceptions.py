"""DRF exception handler rendering every failure as the JSON envelope.

Domain errors (``apps.common.errors.StoreError``) keep their own status
code and message. DRF's API exceptions (parse errors, throttling, method
not allowed) and Django's ``Http404`` are mapped onto the same shape.
Anything else is logged with its traceback and answered with a generic
500 so internals never leak to clients.
"""

import logging

from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.common.errors import StoreError
from apps.common.responses import fail

logger = logging.getLogger("storefront.gateway")


def _detail_text(detail) -> str:
    if isinstance(detail, dict):
        return "; ".join(f"{k}: {_detail_text(v)}" for k, v in detail.items())
    if isinstance(detail, list):
        return "; ".join(_detail_text(d) for d in detail)
    return str(detail)


def envelope_exception_handler(exc, context):
    """Translate ``exc`` into an enveloped ``Response``.

    Args:
        exc: The exception raised by a view.
        context: DRF handler context (holds the view and request).

    Returns:
        Response: ``{"success": false, "error": ...}`` with the mapped status.
    """
    if isinstance(exc, StoreError):
        level = logging.ERROR if exc.status_code >= 500 else logging.INFO
        logger.log(level, "request failed", extra={"error": exc.message, "status": exc.status_code})
        return Response(fail(exc.message), status=exc.status_code)

    if isinstance(exc, Http404):
        return Response(fail("Not found"), status=status.HTTP_404_NOT_FOUND)

    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, exceptions.APIException):
        response.data = fail(_detail_text(exc.detail))
        return response

    view = context.get("view")
    logger.exception("unhandled error", extra={"view": type(view).__name__ if view else None})
    return Response(fail("Internal server error"), status=status.HTTP_500_INTERNAL_SERVER_ERROR)
