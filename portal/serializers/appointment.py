from rest_framework import serializers

from portal.models import Appointment
from portal.serializers.fields import BlankableIntegerField, CleanCharField, DocumentSerializer


class AppointmentSerializer(DocumentSerializer):
    """Public booking form; the status always starts as ``Pending``."""
    name = CleanCharField(max_length=255, required=False, allow_blank=True)
    age = BlankableIntegerField(required=False, allow_null=True, min_value=0)
    message = CleanCharField(required=False, allow_blank=True)
    appointmentDate = serializers.CharField(source='appointment_date', max_length=32, required=False, allow_blank=True)
    appointmentTime = serializers.CharField(source='appointment_time', max_length=32, required=False, allow_blank=True)

    class Meta:
        model = Appointment
        fields = [
            'id', '_id', 'name', 'email', 'phone', 'age', 'gender', 'service', 'message',
            'doctor', 'appointmentDate', 'appointmentTime', 'status', 'createdAt', 'updatedAt',
        ]
        read_only_fields = ['status']


class AppointmentUpdateSerializer(AppointmentSerializer):
    """Admin edits: may also assign doctor/date/time and move the status."""

    class Meta(AppointmentSerializer.Meta):
        read_only_fields = []
