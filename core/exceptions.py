"""
API Exception Handling

Renders every API error as the uniform ``{success: false, message}`` body
the admin console and the public form expect.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _flatten_detail(detail):
    """Reduce DRF error detail (str, list or dict) to a single message."""
    if isinstance(detail, dict):
        for value in detail.values():
            return _flatten_detail(value)
        return ''
    if isinstance(detail, (list, tuple)):
        return _flatten_detail(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    """
    DRF exception handler.

    Delegates to the default handler for status code and headers
    (``WWW-Authenticate``) and rewrites the body.
    Unhandled exceptions become a generic 500 instead of a crash.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(
            "Unhandled error in %s", view.__class__.__name__ if view else 'unknown view'
        )
        return Response(
            {'success': False, 'message': 'Internal server error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    message = _flatten_detail(response.data.get('detail', response.data)
                              if isinstance(response.data, dict) else response.data)

    response.data = {'success': False, 'message': message}
    return response
