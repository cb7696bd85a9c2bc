from rest_framework import serializers

from records.models import User


class UserSerializer(serializers.ModelSerializer):
    """Sanitized account view; the password hash is never included."""

    class Meta:
        model = User
        fields = ['id', 'username', 'role', 'created_at', 'updated_at']
        read_only_fields = fields
