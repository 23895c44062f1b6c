from portal.models import Feedback
from portal.serializers.fields import CleanCharField, DocumentSerializer


class FeedbackSerializer(DocumentSerializer):
    """Feedback as submitted by visitors; new entries wait for approval."""
    name = CleanCharField(max_length=255, required=False, allow_blank=True)
    message = CleanCharField(required=False, allow_blank=True)

    class Meta:
        model = Feedback
        fields = ['id', '_id', 'name', 'email', 'rating', 'message', 'status', 'createdAt', 'updatedAt']
        read_only_fields = ['status']


class FeedbackModerationSerializer(FeedbackSerializer):

    class Meta(FeedbackSerializer.Meta):
        read_only_fields = []
