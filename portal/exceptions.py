"""
API error types.

The response body they produce is shaped by :mod:`portal.handlers`.
"""
from __future__ import annotations

from rest_framework import exceptions, status


class LoginFailed(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Login failed'
    default_code = 'login_failed'


class UnknownIdentity(LoginFailed):
    default_detail = 'User not found'
    default_code = 'not_found'


class InvalidCredentials(LoginFailed):
    default_detail = 'Invalid credentials'
    default_code = 'invalid_credentials'


class SessionExpired(exceptions.AuthenticationFailed):
    """Token is genuine but no longer matches the principal's live session."""
    default_detail = 'Session expired'
    default_code = 'session_expired'


class InvalidToken(exceptions.PermissionDenied):
    """Token is malformed, tampered with, signed by an unknown key or expired."""
    default_detail = 'Invalid token'
    default_code = 'invalid_token'


class MailDeliveryFailed(exceptions.APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Error sending message'
    default_code = 'mail_error'
