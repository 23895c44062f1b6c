"""
Administrator login, logout and registration.

``login`` is the only writer of the session marker besides ``logout``:
it overwrites ``Administrator.session_token`` with a fresh random value
and mints an access token embedding it.  Tokens minted by any earlier
login carry the old marker and are rejected by
:class:`portal.authentication.SessionTokenAuthentication` from then on.
Concurrent logins resolve as last write wins.
"""
from __future__ import annotations

import secrets
from dataclasses import dataclass

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from portal.exceptions import InvalidCredentials, UnknownIdentity
from portal.models import Administrator
from portal.tokens import SessionAccessToken

# 128 bits of randomness, hex encoded
SESSION_MARKER_BYTES = 16


@dataclass
class LoginResult:
    user: Administrator
    token: SessionAccessToken

    def as_payload(self) -> dict:
        return {
            'token': str(self.token),
            'user': profile(self.user),
        }


def profile(user: Administrator) -> dict:
    return {'id': user.id, 'name': user.name, 'email': user.email}


def new_session_marker() -> str:
    return secrets.token_hex(SESSION_MARKER_BYTES)


def find_by_identity(email: str) -> Administrator | None:
    email = Administrator.objects.normalize_email((email or '').strip())
    return Administrator.objects.filter(email=email).first()


def login(email: str, password: str) -> LoginResult:
    """Check credentials, start a new session and mint its access token.

    Raises :class:`UnknownIdentity` when no administrator has this email
    and :class:`InvalidCredentials` when the password does not match or
    the account is disabled.
    """
    user = find_by_identity(email)
    if user is None:
        raise UnknownIdentity()
    if not user.check_password(password) or not user.is_active:
        raise InvalidCredentials()

    user.session_token = new_session_marker()
    user.save(update_fields=['session_token'])
    return LoginResult(user=user, token=SessionAccessToken.for_session(user))


def logout(user: Administrator) -> None:
    """Clear the session marker so no outstanding token verifies any more."""
    user.session_token = ''
    user.save(update_fields=['session_token'])


def register(*, name: str, email: str, password: str) -> Administrator:
    if find_by_identity(email) is not None:
        raise ValidationError('User already exists')
    try:
        with transaction.atomic():
            return Administrator.objects.create_user(email=email, password=password, name=name)
    except IntegrityError as e:
        # lost a race against another registration of the same email
        raise ValidationError('User already exists') from e
