"""
Permission classes separating the public website from the admin panel.

Combine them with DRF's ``|`` operator on endpoints serving both, e.g.
``ReadOnly | IsAdministrator`` for content the public may read.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsAdministrator(BasePermission):
    """Allow access only to requests authenticated by a live admin session."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and user.is_active)


class ReadOnly(BasePermission):
    """Allow read‑only access (GET, HEAD, OPTIONS)."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return request.method in SAFE_METHODS


class CreateOnly(BasePermission):
    """Allow anonymous submissions (POST) such as bookings or feedback."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return request.method == "POST"
