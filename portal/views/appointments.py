"""
Appointment endpoints.

Visitors book from the public website; everything else (listing,
editing, deleting bookings) belongs to the admin panel.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from ..authentication import PublicSubmitAuthentication
from ..models import Appointment
from ..permissions import CreateOnly, IsAdministrator
from ..serializers.appointment import AppointmentSerializer, AppointmentUpdateSerializer
from ..throttling import PublicWriteThrottle


@api_view(['GET', 'POST'])
@authentication_classes([PublicSubmitAuthentication])
@permission_classes([CreateOnly | IsAdministrator])
@throttle_classes([PublicWriteThrottle])
def appointments(request):
    if request.method == 'POST':
        s = AppointmentSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        s.save()
        return Response(s.data, status=status.HTTP_201_CREATED)

    qs = Appointment.objects.all()
    search = (request.query_params.get('search') or '').strip()
    if search:
        qs = qs.filter(name__icontains=search)
    return Response(AppointmentSerializer(qs.order_by('-created_at', '-id'), many=True).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdministrator])
def appointment_detail(request, pk: int):
    appointment = Appointment.objects.filter(pk=pk).first()
    if appointment is None:
        raise NotFound('Appointment not found')
    if request.method == 'GET':
        return Response(AppointmentSerializer(appointment).data)
    if request.method in ('PUT', 'PATCH'):
        s = AppointmentUpdateSerializer(appointment, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        s.save()
        return Response(s.data)
    # DELETE
    appointment.delete()
    return Response({'message': 'Appointment deleted successfully'})
