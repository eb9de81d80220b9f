import logging

from django.conf import settings
from django.http import JsonResponse
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class NotFoundOrUnauthorized(APIException):
    """Missing resource and missing ownership look the same to the caller."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found or unauthorized.'
    default_code = 'not_found'


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Request conflicts with the current state of the resource.'
    default_code = 'conflict'


class InvalidReference(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid reference provided (worker_id/category_id may not exist).'
    default_code = 'invalid_reference'


class InvalidStateTransition(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = 'invalid_transition'

    def __init__(self, current, requested, detail=None):
        self.current = current
        self.requested = requested
        if detail is None:
            detail = f"Cannot change status from {current} to {requested}"
        super().__init__(detail)


def _message_from(detail):
    if isinstance(detail, dict):
        detail = detail.get('detail', detail)
    if isinstance(detail, list) and detail:
        detail = detail[0]
    return str(detail)


def api_exception_handler(exc, context):
    """Wrap every API error in the ``{success, message}`` envelope."""
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'API'}: {exc}")
        body = {'success': False, 'message': 'Internal server error'}
        if settings.DEBUG:
            body['error'] = str(exc)
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        body = {'success': False, 'message': 'Validation failed', 'errors': response.data}
    else:
        body = {'success': False, 'message': _message_from(response.data)}
    response.data = body
    return response


def not_found_handler(request, exception=None):
    return JsonResponse(
        {'success': False, 'message': f"Route {request.path} not found"},
        status=status.HTTP_404_NOT_FOUND
    )
