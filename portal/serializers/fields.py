"""Serializer fields shared by the content serializers."""
import html
import os

import bleach
from rest_framework import serializers

# Markup allowed in blog bodies written from the admin panel
BLOG_TAGS = frozenset({
    'a', 'b', 'blockquote', 'br', 'code', 'em', 'h2', 'h3', 'h4', 'i',
    'li', 'ol', 'p', 'pre', 'strong', 'ul',
})
BLOG_ATTRIBUTES = {'a': ['href', 'title']}


class CleanCharField(serializers.CharField):
    """CharField stripping HTML before it reaches the database.

    With an allow-list of ``tags`` the value stays HTML (blog bodies);
    without one the value is plain text: tags are dropped and entities
    decoded, so "Tom & Jerry" is stored as typed.
    """

    def __init__(self, *args, tags=frozenset(), attributes=None, **kwargs):
        self.tags = tags
        self.attributes = attributes or {}
        super().__init__(*args, **kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        cleaned = bleach.clean(value, tags=self.tags, attributes=self.attributes, strip=True)
        return cleaned if self.tags else html.unescape(cleaned)


class StoredFileField(serializers.Field):
    """Expose an uploaded file by its stored file name, as the front-end expects."""

    def __init__(self, **kwargs):
        kwargs['read_only'] = True
        super().__init__(**kwargs)

    def to_representation(self, value):
        if not value:
            return ''
        return os.path.basename(value.name)


class DocumentSerializer(serializers.ModelSerializer):
    """Base for content serializers: ``_id`` alias and camelCase timestamps."""
    _id = serializers.ReadOnlyField(source='id')
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)


class BlankableIntegerField(serializers.IntegerField):
    """IntegerField reading an empty string (an untouched form input) as null."""

    def validate_empty_values(self, data):
        if data == '':
            data = None
        return super().validate_empty_values(data)
