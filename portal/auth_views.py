"""
Administrator authentication views.

``login_view`` starts a new session (retiring every token of the
previous one) and returns a one hour bearer token.  ``logout_view``
ends the current session.  ``register_view`` lets a signed-in
administrator create another administrator account; the very first
account is created with the ``ensure_admin`` management command.
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.decorators import (
    api_view,
    authentication_classes,
    permission_classes,
    throttle_classes,
)
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from portal.exceptions import LoginFailed
from portal.permissions import IsAdministrator
from portal.serializers.auth import LoginSerializer, RegisterSerializer
from portal.services import sessions
from portal.services.audit import client_ip, log_action
from portal.throttling import LoginRateThrottle

logger = logging.getLogger(__name__)


def _audit(**kwargs) -> None:
    try:
        log_action(**kwargs)
    except Exception:
        logger.warning('could not record audit event %s', kwargs.get('action'), exc_info=True)


# ---------------------------------------------------------------------
# Email/password login
# ---------------------------------------------------------------------
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    """
    Log an administrator in.
    Accepts fields:
      - email or identity
      - password or credential
    Returns ``{token, user: {id, name, email}}``.
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    email = s.validated_data['email']
    ip = client_ip(request)

    try:
        result = sessions.login(email, s.validated_data['password'])
    except LoginFailed as e:
        # record the attempted identity only, never the password
        _audit(user=None, action='login', object_type='administrator',
               detail={'result': 'fail', 'reason': e.default_code, 'email': email}, ip=ip)
        logger.info('login failed for %s: %s', email, e.default_code)
        raise

    _audit(user=result.user, action='login', object_type='administrator', object_id=result.user.id,
           detail={'result': 'ok'}, ip=ip)
    logger.info('administrator %s logged in', result.user.id)
    return Response(result.as_payload(), status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAdministrator])
def logout_view(request):
    """End the current session; every token of this administrator stops working."""
    user = request.user
    sessions.logout(user)
    _audit(user=user, action='logout', object_type='administrator', object_id=user.id,
           ip=client_ip(request))
    return Response({'message': 'Logged out successfully'})


@api_view(['GET'])
@permission_classes([IsAdministrator])
def me_view(request):
    return Response(sessions.profile(request.user))


@api_view(['POST'])
@permission_classes([IsAdministrator])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = sessions.register(**s.validated_data)
    _audit(user=request.user, action='register', object_type='administrator', object_id=user.id,
           detail={'email': user.email}, ip=client_ip(request))
    return Response({'message': 'User registered successfully', 'user': sessions.profile(user)},
                    status=status.HTTP_201_CREATED)
