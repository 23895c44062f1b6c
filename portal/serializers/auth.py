from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    """Accepts ``email``/``password`` or the ``identity``/``credential`` aliases."""
    email = serializers.CharField(required=False, allow_blank=True)
    identity = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    credential = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)

    def validate(self, attrs):
        email = (attrs.get('email') or attrs.get('identity') or '').strip()
        password = attrs.get('password') or attrs.get('credential') or ''
        if not email:
            raise serializers.ValidationError({'email': 'Email is required'})
        if not password:
            raise serializers.ValidationError({'password': 'Password is required'})
        return {'email': email, 'password': password}


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, allow_blank=True, required=False, default='')
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False, write_only=True)

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v
