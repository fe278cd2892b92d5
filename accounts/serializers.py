from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    """
    Admin login payload.
    Both fields are required and may not be blank.
    """
    username = serializers.CharField(
        required=True,
        trim_whitespace=False,
        error_messages={
            'required': 'Username and password are required',
            'blank': 'Username and password are required',
        }
    )
    password = serializers.CharField(
        required=True,
        trim_whitespace=False,
        style={'input_type': 'password'},
        error_messages={
            'required': 'Username and password are required',
            'blank': 'Username and password are required',
        }
    )


class AdminUserSerializer(serializers.Serializer):
    """Public view of the admin identity returned on mobile login."""
    username = serializers.CharField()
    email = serializers.CharField()
    role = serializers.CharField()
