from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Profile of the signed-in user, with how many bills they have saved."""

    transaction_count = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'full_name', 'transaction_count', 'created_at', 'last_login']
        read_only_fields = fields

    def get_transaction_count(self, obj) -> int:
        return obj.transactions.count()


class UserRegistrationSerializer(serializers.Serializer):
    """
    Sign-up form.

    Email uniqueness is checked by ``register_user`` so the rule lives in
    one place.
    """

    email = serializers.EmailField(max_length=255)
    full_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    password_confirm = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({'password_confirm': 'Passwords do not match'})

        candidate = User(email=attrs['email'], full_name=attrs.get('full_name', ''))
        try:
            validate_password(attrs['password'], user=candidate)
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': list(e.messages)})
        return attrs


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})


# Response shapes for API documentation
class TokenPairSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokenPairSerializer()


class AuthErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
    code = serializers.CharField()
