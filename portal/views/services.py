"""
Clinic services (treatments and check-ups) shown on the website.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from ..authentication import PublicReadAuthentication
from ..models import Service
from ..permissions import IsAdministrator, ReadOnly
from ..serializers.service import ServiceSerializer
from ..services import uploads


@api_view(['GET', 'POST'])
@authentication_classes([PublicReadAuthentication])
@permission_classes([ReadOnly | IsAdministrator])
def services(request):
    if request.method == 'GET':
        return Response(ServiceSerializer(Service.objects.order_by('created_at', 'id'), many=True).data)

    photo = uploads.image_upload(request, 'photo')
    s = ServiceSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    service = s.save(photo=photo) if photo else s.save()
    return Response(ServiceSerializer(service).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@authentication_classes([PublicReadAuthentication])
@permission_classes([ReadOnly | IsAdministrator])
def service_detail(request, pk: int):
    service = Service.objects.filter(pk=pk).first()
    if service is None:
        raise NotFound('Service not found')
    if request.method == 'GET':
        return Response(ServiceSerializer(service).data)

    if request.method in ('PUT', 'PATCH'):
        photo = uploads.image_upload(request, 'photo')
        s = ServiceSerializer(service, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        with uploads.replacing(service.photo, photo):
            service = s.save()
        return Response(ServiceSerializer(service).data)

    # DELETE
    uploads.discard(service.photo)
    service.delete()
    return Response({'message': 'Service deleted successfully'})
