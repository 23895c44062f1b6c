from rest_framework import serializers

from portal.models import Blog, Comment
from portal.serializers.fields import (
    BLOG_ATTRIBUTES,
    BLOG_TAGS,
    CleanCharField,
    DocumentSerializer,
    StoredFileField,
)


class BlogSerializer(DocumentSerializer):
    content = CleanCharField(tags=BLOG_TAGS, attributes=BLOG_ATTRIBUTES)
    image = StoredFileField()
    commentCount = serializers.SerializerMethodField()

    class Meta:
        model = Blog
        fields = [
            'id', '_id', 'title', 'author', 'date', 'content', 'status', 'image',
            'commentCount', 'createdAt', 'updatedAt',
        ]

    def get_commentCount(self, obj: Blog) -> int:
        # list/detail views annotate comment_count; fall back to a query otherwise
        count = getattr(obj, 'comment_count', None)
        return count if count is not None else obj.comments.count()


class CommentSerializer(DocumentSerializer):
    blogId = serializers.PrimaryKeyRelatedField(source='blog', read_only=True)
    name = CleanCharField(max_length=255)
    message = CleanCharField()

    class Meta:
        model = Comment
        fields = ['id', '_id', 'blogId', 'name', 'message', 'createdAt', 'updatedAt']
