"""
Administrative dashboard endpoint.

Provides the headline counts shown on the admin panel's home page.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from ..models import Appointment, Doctor
from ..permissions import IsAdministrator


@api_view(['GET'])
@permission_classes([IsAdministrator])
def dashboard_stats(request):
    """Return appointment, patient and doctor counts.

    Patients are not stored separately; they are counted as the distinct
    e-mail addresses that booked an appointment.
    """
    patients = (
        Appointment.objects.exclude(email='')
        .values('email').distinct().count()
    )
    available = Doctor.objects.filter(status=Doctor.STATUS_AVAILABLE).count()
    on_leave = Doctor.objects.exclude(status=Doctor.STATUS_AVAILABLE).count()
    return Response({
        'appointments': Appointment.objects.count(),
        'patients': patients,
        'doctors': available,
        'doctorsOnLeave': on_leave,
    })
