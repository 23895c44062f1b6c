"""
Rate limits for anonymous traffic.

Authenticated administrators are never throttled: ``AnonRateThrottle``
returns no cache key for them.
"""
from rest_framework.permissions import SAFE_METHODS
from rest_framework.throttling import AnonRateThrottle


class LoginRateThrottle(AnonRateThrottle):
    scope = 'login'


class PublicWriteThrottle(AnonRateThrottle):
    """Limit form submissions from the public website (bookings, comments...)."""
    scope = 'public_write'

    def allow_request(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return super().allow_request(request, view)
