"""
Doctor directory.

The public website lists doctors; administrators manage entries and
their photos.  Replacing or deleting a doctor also removes the old
photo file from storage.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from ..authentication import PublicReadAuthentication
from ..models import Doctor
from ..permissions import IsAdministrator, ReadOnly
from ..serializers.doctor import DoctorSerializer
from ..services import uploads


def _get_doctor(pk: int) -> Doctor:
    doctor = Doctor.objects.filter(pk=pk).first()
    if doctor is None:
        raise NotFound('Doctor not found')
    return doctor


@api_view(['GET', 'POST'])
@authentication_classes([PublicReadAuthentication])
@permission_classes([ReadOnly | IsAdministrator])
def doctors(request):
    if request.method == 'GET':
        return Response(DoctorSerializer(Doctor.objects.order_by('created_at', 'id'), many=True).data)

    photo = uploads.image_upload(request, 'photo')
    s = DoctorSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    doctor = s.save(photo=photo) if photo else s.save()
    return Response(DoctorSerializer(doctor).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@authentication_classes([PublicReadAuthentication])
@permission_classes([ReadOnly | IsAdministrator])
def doctor_detail(request, pk: int):
    doctor = _get_doctor(pk)
    if request.method == 'GET':
        return Response(DoctorSerializer(doctor).data)

    if request.method in ('PUT', 'PATCH'):
        photo = uploads.image_upload(request, 'photo')
        s = DoctorSerializer(doctor, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        with uploads.replacing(doctor.photo, photo):
            doctor = s.save()
        return Response(DoctorSerializer(doctor).data)

    # DELETE
    uploads.discard(doctor.photo)
    doctor.delete()
    return Response({'message': 'Doctor deleted'})
