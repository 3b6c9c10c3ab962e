"""
Academy User Serializers

Serializers:
- CustomTokenObtainPairSerializer: JWT token with role and fee metadata
- ProfileSerializer: Read-only profile data
- UserSerializer: Current user data including profile
"""

from typing import Dict, Any
from django.contrib.auth.models import User
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from .models import Profile


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    JWT token serializer that adds the academy role and fee status to the
    token payload and to the login response.
    """

    @classmethod
    def get_token(cls, user: User) -> RefreshToken:
        token = super().get_token(user)

        profile, _ = Profile.objects.get_or_create(user=user)
        token["username"] = user.username
        token["role"] = profile.role
        token["fees_paid"] = profile.fees_paid
        return token

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        data = super().validate(attrs)

        profile, _ = Profile.objects.get_or_create(user=self.user)
        data.update(
            {
                "user_id": self.user.id,
                "username": self.user.username,
                "role": profile.role,
                "fees_paid": profile.fees_paid,
            }
        )
        return data


class ProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = Profile
        fields = ("role", "fees_paid", "phone")
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """
    Current user data with the embedded profile.
    """

    profile = ProfileSerializer(read_only=True)
    full_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ("id", "username", "email", "first_name", "last_name", "full_name", "profile")
        read_only_fields = fields

    def get_full_name(self, obj: User) -> str:
        return obj.get_full_name() or obj.username
