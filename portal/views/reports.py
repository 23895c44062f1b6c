"""
Patient reports uploaded as PDF files by administrators.
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from ..models import Report
from ..permissions import IsAdministrator
from ..serializers.report import ReportSerializer
from ..services import uploads

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAdministrator])
def reports(request):
    if request.method == 'GET':
        return Response(ReportSerializer(Report.objects.order_by('-created_at', '-id'), many=True).data)

    pdf = uploads.pdf_upload(request, 'pdf')
    if pdf is None:
        raise ValidationError('PDF file is required')
    s = ReportSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    report = s.save(pdf_file=pdf)
    logger.info('report %s uploaded by %s', report.id, request.user.id)
    return Response(ReportSerializer(report).data, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAdministrator])
def report_detail(request, pk: int):
    report = Report.objects.filter(pk=pk).first()
    # an unknown id is not an error: the report is gone either way
    if report is not None:
        uploads.discard(report.pdf_file)
        report.delete()
    return Response({'message': 'Report deleted successfully'})
