from portal.models import Service
from portal.serializers.fields import DocumentSerializer, StoredFileField


class ServiceSerializer(DocumentSerializer):
    photo = StoredFileField()

    class Meta:
        model = Service
        fields = [
            'id', '_id', 'name', 'description', 'duration', 'price', 'status', 'photo',
            'createdAt', 'updatedAt',
        ]
