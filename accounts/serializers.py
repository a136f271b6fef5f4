from django.contrib.auth import get_user_model

from rest_framework import serializers

from .permissions import has_admin_role

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    is_admin = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ("id", "username", "email", "is_admin", "date_joined")
        read_only_fields = fields

    def get_is_admin(self, obj):
        return has_admin_role(obj.id)


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)
