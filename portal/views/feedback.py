"""
Visitor feedback with moderation.

New feedback starts out ``Pending``; only ``Approved`` entries are shown
on the public website.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from ..authentication import PublicSubmitAuthentication
from ..models import Feedback
from ..permissions import CreateOnly, IsAdministrator
from ..serializers.feedback import FeedbackModerationSerializer, FeedbackSerializer
from ..throttling import PublicWriteThrottle


def _newest_first(qs):
    return qs.order_by('-created_at', '-id')


@api_view(['GET', 'POST'])
@authentication_classes([PublicSubmitAuthentication])
@permission_classes([CreateOnly | IsAdministrator])
@throttle_classes([PublicWriteThrottle])
def feedback(request):
    if request.method == 'POST':
        s = FeedbackSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        return Response(FeedbackSerializer(s.save()).data, status=status.HTTP_201_CREATED)

    qs = Feedback.objects.all()
    wanted = request.query_params.get('status')
    if wanted:
        qs = qs.filter(status=wanted)
    return Response(FeedbackSerializer(_newest_first(qs), many=True).data)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def approved_feedback(request):
    qs = _newest_first(Feedback.objects.filter(status=Feedback.STATUS_APPROVED))
    return Response(FeedbackSerializer(qs, many=True).data)


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdministrator])
def feedback_detail(request, pk: int):
    entry = Feedback.objects.filter(pk=pk).first()
    if entry is None:
        raise NotFound('Feedback not found')

    if request.method == 'DELETE':
        entry.delete()
        return Response({'message': 'Feedback deleted successfully'})

    s = FeedbackModerationSerializer(entry, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    return Response(FeedbackSerializer(s.save()).data)
