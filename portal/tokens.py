"""
Access tokens bound to an administrator's live session.

Tokens are simplejwt access tokens with one extra claim, the session
marker (``settings.SESSION_TOKEN_CLAIM``) written to the administrator
row by the login that minted the token.  Signing goes through a keyring
backend: every key in ``settings.JWT_SIGNING_KEYS`` verifies, only
``settings.JWT_ACTIVE_KID`` signs, and the key id travels in the JOSE
header so keys can be rotated.
"""
from __future__ import annotations

from typing import Any

import jwt
from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver
from rest_framework_simplejwt.backends import TokenBackend
from rest_framework_simplejwt.exceptions import TokenBackendError
from rest_framework_simplejwt.tokens import AccessToken


class KeyringTokenBackend(TokenBackend):
    """HMAC token backend holding several secrets addressed by ``kid``."""

    def __init__(self, algorithm: str, keys: dict[str, str], active_kid: str):
        if active_kid not in keys:
            raise ValueError(f"active key id {active_kid!r} has no secret")
        super().__init__(algorithm, keys[active_kid])
        self.keys = dict(keys)
        self.active_kid = active_kid

    def encode(self, payload: dict[str, Any]) -> str:
        return jwt.encode(
            payload,
            self.keys[self.active_kid],
            algorithm=self.algorithm,
            headers={'kid': self.active_kid},
        )

    def decode(self, token, verify: bool = True) -> dict[str, Any]:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as e:
            raise TokenBackendError('Token is invalid') from e
        kid = header.get('kid')
        key = self.keys.get(kid) if isinstance(kid, str) else None
        if key is None:
            raise TokenBackendError('Token is signed with an unknown key')
        try:
            return jwt.decode(
                token,
                key,
                algorithms=[self.algorithm],
                options={'verify_signature': verify},
            )
        except jwt.InvalidTokenError as e:
            raise TokenBackendError('Token is invalid or expired') from e


_backend: KeyringTokenBackend | None = None


def get_token_backend() -> KeyringTokenBackend:
    global _backend
    if _backend is None:
        _backend = KeyringTokenBackend(
            settings.SIMPLE_JWT.get('ALGORITHM', 'HS256'),
            settings.JWT_SIGNING_KEYS,
            settings.JWT_ACTIVE_KID,
        )
    return _backend


@receiver(setting_changed)
def _reset_token_backend(*, setting, **kwargs):
    global _backend
    if setting in {'JWT_SIGNING_KEYS', 'JWT_ACTIVE_KID', 'SIMPLE_JWT'}:
        _backend = None


class SessionAccessToken(AccessToken):
    """Access token carrying the session marker of the login that minted it."""

    @property
    def token_backend(self):
        return get_token_backend()

    def get_token_backend(self):
        return get_token_backend()

    @classmethod
    def for_session(cls, user) -> 'SessionAccessToken':
        token = cls.for_user(user)
        token[settings.SESSION_TOKEN_CLAIM] = user.session_token
        return token

    @property
    def session_marker(self) -> str | None:
        marker = self.payload.get(settings.SESSION_TOKEN_CLAIM)
        return marker if isinstance(marker, str) else None
