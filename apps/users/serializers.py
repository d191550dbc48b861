from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import IntegrityError, transaction
from django.utils import timezone
from core.constants import USER_ROLE_CHOICES

import logging

User = get_user_model()
logger = logging.getLogger(__name__)


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField(max_length=254)
    password = serializers.CharField(
        max_length=128,
        write_only=True,
        min_length=8,
        error_messages={'min_length': 'Password must be at least 8 characters long.'}
    )
    role = serializers.ChoiceField(choices=USER_ROLE_CHOICES)
    display_name = serializers.CharField(max_length=150, required=False, allow_blank=True)

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already in use.")
        return value

    def validate(self, data):
        validate_password(data['password'], user=User(email=data['email'], username=data['email']))
        return data

    def save(self):
        data = self.validated_data
        user = User(
            username=data['email'],
            email=data['email'],
            role=data['role'],
            display_name=data.get('display_name', '').strip(),
        )
        user.set_password(data['password'])
        try:
            with transaction.atomic():
                user.save()
        except IntegrityError:
            # Another registration with this email committed after validate_email ran.
            logger.warning(f"Concurrent registration refused for {data['email']}")
            raise serializers.ValidationError({"email": "Email already in use."})
        logger.info(f"Registered {user.role} account {user.id}")
        return user


class LoginSerializer(serializers.Serializer):
    identifier = serializers.CharField(max_length=255, trim_whitespace=True)
    password = serializers.CharField(max_length=128, write_only=True)

    def validate(self, data):
        identifier = data.get('identifier').strip().lower()
        password = data.get('password')
        user = User.get_by_identifier(identifier)
        if not user or not user.check_password(password):
            logger.warning(f"Failed login attempt for identifier: {identifier}")
            raise serializers.ValidationError("Invalid email or password.")
        if not user.is_active:
            logger.warning(f"Login refused for inactive user {user.id}")
            raise serializers.ValidationError("User account is disabled. Please contact support.")
        data['user'] = user
        return data

    def save(self):
        user = self.validated_data['user']
        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])
        return user


class UserSerializer(serializers.ModelSerializer):
    email = serializers.SerializerMethodField()
    phone_number = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'display_name', 'role', 'email', 'phone_number', 'created_at']
        read_only_fields = fields

    def _is_self(self, obj):
        request = self.context.get('request')
        if request is None:
            return True
        return request.user.is_authenticated and request.user.pk == obj.pk

    def get_email(self, obj):
        return obj.email if self._is_self(obj) else None

    def get_phone_number(self, obj):
        return obj.phone_number if self._is_self(obj) else None


class UserUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['display_name', 'phone_number']

    def validate_phone_number(self, value):
        if not value:
            return None
        value = value.strip()
        if not value.startswith('+') or not value[1:].isdigit():
            raise serializers.ValidationError("Invalid phone number format.")
        if User.objects.filter(phone_number=value).exclude(pk=self.instance.pk).exists():
            raise serializers.ValidationError("Phone number already in use.")
        return value
