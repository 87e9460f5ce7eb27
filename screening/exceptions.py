import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class AppointmentError(APIException):
    """Base class for failures while booking a test appointment."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'appointment could not be created'
    default_code = 'appointment_error'


class DateResolutionError(AppointmentError):
    """The appointment date could not be resolved."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'appointment date could not be resolved'
    default_code = 'date_resolution_failed'


class AppointmentPersistenceError(AppointmentError):
    """The resolved appointment could not be stored."""
    default_detail = 'appointment could not be stored'
    default_code = 'persistence_failed'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error on %s', getattr(context.get('request'), 'path', '?'), exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    if isinstance(exc, AppointmentError):
        logger.error('appointment request failed: %s', exc.detail, exc_info=exc.__cause__)
        return Response({'ok': False, 'error': {'code': exc.default_code, 'message': str(exc.detail)}},
                        status=resp.status_code)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    return Response({'ok': False, 'error': {'code': 'api_error', 'message': detail}}, status=resp.status_code)
