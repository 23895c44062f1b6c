"""
Unified API exception handler.

Every error leaves the API as ``{"ok": false, "message": ..., "error":
{"code": ..., "message": ...}}`` with the HTTP status of the underlying
DRF exception.  Kept apart from :mod:`portal.exceptions` because
``rest_framework.views`` loads the authentication classes, which import
those exception types.
"""
from __future__ import annotations

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def _error_code(exc: Exception) -> str:
    if isinstance(exc, exceptions.APIException):
        codes = exc.get_codes()
        if isinstance(codes, str):
            return codes
        if isinstance(exc, exceptions.ValidationError):
            return 'invalid'
    return 'api_error'


def _error_message(exc: Exception, data):
    if isinstance(exc, exceptions.NotAuthenticated):
        return 'No token provided'
    if isinstance(data, dict):
        detail = data.get('detail')
        return detail if detail is not None else data
    if isinstance(data, list) and len(data) == 1:
        return data[0]
    return data


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('Unhandled error in %s', type(view).__name__ if view else 'view')
        return Response(
            {'ok': False, 'message': 'Server error', 'error': {'code': 'server_error', 'message': 'Server error'}},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    # normalize response, keeping headers such as WWW-Authenticate
    message = _error_message(exc, resp.data)
    resp.data = {
        'ok': False,
        'message': message if isinstance(message, str) else 'Invalid request',
        'error': {'code': _error_code(exc), 'message': message},
    }
    return resp
