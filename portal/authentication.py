"""
Bearer token authentication bound to a single live session.

A request is authenticated when its ``Authorization: Bearer <token>``
header carries a token that (1) verifies against one of the configured
signing keys, (2) has not expired and (3) embeds the session marker
currently stored on the administrator's row.  A newer login overwrites
that marker, which silently retires every token minted before it.

Outcomes:

* no header, or a header not starting with ``Bearer `` -> no credentials;
  protected views answer 401 without touching the database;
* malformed, tampered, unknown-key or expired token -> 403 ``Invalid token``;
* unknown/inactive administrator or superseded marker -> 401 ``Session expired``.

The ``Public*`` variants let the website keep working in a browser that
still holds a stale admin token: on the listed methods a rejected token
leaves the request anonymous and the view's permissions decide.
"""
from __future__ import annotations

import logging

from django.utils.crypto import constant_time_compare
from rest_framework import authentication
from rest_framework.permissions import SAFE_METHODS
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings

from .exceptions import InvalidToken, SessionExpired
from .models import Administrator
from .tokens import SessionAccessToken

logger = logging.getLogger(__name__)


class SessionTokenAuthentication(authentication.BaseAuthentication):
    keyword = 'Bearer'
    www_authenticate_realm = 'api'
    # methods for which a rejected token leaves the request anonymous
    anonymous_methods: frozenset = frozenset()

    def authenticate(self, request):
        try:
            return self._authenticate(request)
        except (InvalidToken, SessionExpired) as e:
            if request.method not in self.anonymous_methods:
                raise
            logger.debug('treating %s %s as anonymous: %s', request.method, request.path, e.detail)
            return None

    def _authenticate(self, request):
        header = authentication.get_authorization_header(request)
        prefix = f'{self.keyword} '.encode()
        if not header or not header.startswith(prefix):
            return None

        raw_token = header[len(prefix):].strip()
        try:
            raw_token = raw_token.decode('ascii')
        except UnicodeError:
            raise InvalidToken()
        if not raw_token:
            raise InvalidToken()
        return self.authenticate_credentials(raw_token)

    def authenticate_credentials(self, raw_token: str):
        try:
            token = SessionAccessToken(raw_token)
        except TokenError as e:
            logger.debug('rejected access token: %s', e)
            raise InvalidToken() from e

        user = self.get_user(token)
        marker = token.session_marker
        if (
            user is None
            or not user.is_active
            or not marker
            or not constant_time_compare(user.session_token, marker)
        ):
            raise SessionExpired()
        return user, token

    def get_user(self, token: SessionAccessToken) -> Administrator | None:
        user_id = token.get(api_settings.USER_ID_CLAIM)
        if user_id is None:
            return None
        try:
            return Administrator.objects.filter(**{api_settings.USER_ID_FIELD: user_id}).first()
        except (TypeError, ValueError):
            return None

    def authenticate_header(self, request):
        return f'{self.keyword} realm="{self.www_authenticate_realm}"'


class PublicReadAuthentication(SessionTokenAuthentication):
    """For content the website reads: a stale token never blocks a GET."""
    anonymous_methods = frozenset(SAFE_METHODS)


class PublicSubmitAuthentication(SessionTokenAuthentication):
    """For forms the website posts (bookings, feedback) next to admin-only reads."""
    anonymous_methods = frozenset({'POST'})
