from portal.models import Doctor
from portal.serializers.fields import DocumentSerializer, StoredFileField


class DoctorSerializer(DocumentSerializer):
    photo = StoredFileField()

    class Meta:
        model = Doctor
        fields = [
            'id', '_id', 'name', 'email', 'specialization', 'experience', 'phone',
            'status', 'photo', 'createdAt', 'updatedAt',
        ]
