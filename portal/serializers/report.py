from rest_framework import serializers

from portal.models import Report
from portal.serializers.fields import DocumentSerializer, StoredFileField


class ReportSerializer(DocumentSerializer):
    patientName = serializers.CharField(source='patient_name', max_length=255, required=False, allow_blank=True)
    reportDate = serializers.DateTimeField(source='report_date', required=False)
    pdfFile = StoredFileField(source='pdf_file')

    class Meta:
        model = Report
        fields = ['id', '_id', 'title', 'patientName', 'reportDate', 'pdfFile', 'status', 'createdAt', 'updatedAt']
