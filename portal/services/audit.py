"""
Audit trail of administrator actions (logins, logouts, registrations).

Rows never hold secrets: login failures record the attempted email and
the failure reason only.
"""
from typing import Any, Dict, Optional

from portal.models import Administrator, AuditEvent


def client_ip(request) -> Optional[str]:
    # first hop of X-Forwarded-For when running behind the TLS proxy
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
    if forwarded:
        return forwarded.split(',')[0].strip() or None
    return request.META.get('REMOTE_ADDR') or None


def log_action(*, user: Optional[Administrator], action: str, object_type: Optional[str] = None,
               object_id=None, detail: Optional[Dict[str, Any]] = None,
               ip: Optional[str] = None) -> AuditEvent:
    return AuditEvent.objects.create(
        user=user if isinstance(user, Administrator) and user.pk else None,
        action=action,
        object_type=object_type,
        object_id=str(object_id) if object_id is not None else None,
        detail=detail or {},
        ip=ip,
    )
