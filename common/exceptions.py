"""Common exception handlers for the project."""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """Return a consistent error response structure."""
    if isinstance(exc, DjangoValidationError):
        detail = exc.message_dict if hasattr(exc, 'error_dict') else exc.messages
        exc = DRFValidationError(detail=detail)

    response = exception_handler(exc, context)

    if response is None:
        logger.error(
            "Unhandled API error: %s", exc,
            exc_info=exc,
            extra={'view': context.get('view').__class__.__name__ if context.get('view') else None},
        )
        return Response(
            {"errors": [str(exc)]}, status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response({"errors": response.data}, status=response.status_code)
