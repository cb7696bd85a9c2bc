from rest_framework import serializers

class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(trim_whitespace=False)
    password = serializers.CharField(trim_whitespace=False)

    def validate_username(self, v):
        if not v:
            raise serializers.ValidationError('username is required')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('password is required')
        return v


class RegisterSerializer(serializers.Serializer):
    # Presence, role membership and password length are checked by the auth
    # service so the errors stay InvalidRole and InvalidInput
    username = serializers.CharField(max_length=150, trim_whitespace=False, allow_blank=True, default='')
    password = serializers.CharField(trim_whitespace=False, allow_blank=True, default='', write_only=True)
    role = serializers.CharField(allow_blank=True, default='')
