"""
Serializers for Role and Permission models
"""
from rest_framework import serializers

from core.access_control.catalog import PermissionKey
from core.access_control.dtos import RoleCreateDTO, RoleUpdateDTO
from core.access_control.models import Permission, Role


class PermissionSerializer(serializers.ModelSerializer):
    """Read serializer for Permission model"""
    id = serializers.CharField(source='code', read_only=True)

    class Meta:
        model = Permission
        fields = ['id', 'module', 'action', 'name_en', 'name_ar']
        read_only_fields = fields


class RoleReadSerializer(serializers.ModelSerializer):
    """Read serializer for Role model (permissions as "module:action" ids)"""
    permissions = serializers.SerializerMethodField()
    users_count = serializers.SerializerMethodField()

    class Meta:
        model = Role
        fields = [
            'id', 'code', 'name_en', 'name_ar', 'description_en', 'description_ar',
            'is_active', 'has_full_access', 'is_super_admin', 'permissions',
            'users_count', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_permissions(self, obj):
        return sorted(p.code for p in obj.permissions.all())

    def get_users_count(self, obj):
        return obj.users.count()


def _validate_permission_ids(value):
    invalid = [item for item in value if PermissionKey.parse(item) is None]
    if invalid:
        raise serializers.ValidationError(f"Unknown permissions: {', '.join(invalid)}")
    return value


class RoleCreateSerializer(serializers.Serializer):
    """Write serializer for creating a role"""
    name_en = serializers.CharField(max_length=255)
    name_ar = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description_en = serializers.CharField(required=False, allow_blank=True)
    description_ar = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False, default=True)
    has_full_access = serializers.BooleanField(required=False, default=False)
    permissions = serializers.ListField(child=serializers.CharField(), required=False, default=list)

    def validate_permissions(self, value):
        return _validate_permission_ids(value)

    def to_dto(self) -> RoleCreateDTO:
        return RoleCreateDTO(**self.validated_data)


class RoleUpdateSerializer(serializers.Serializer):
    """Write serializer for updating a role"""
    role_id = serializers.IntegerField()  # Primary Key
    name_en = serializers.CharField(max_length=255, required=False)
    name_ar = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description_en = serializers.CharField(required=False, allow_blank=True)
    description_ar = serializers.CharField(required=False, allow_blank=True)
    has_full_access = serializers.BooleanField(required=False)
    permissions = serializers.ListField(child=serializers.CharField(), required=False)

    def validate_permissions(self, value):
        return _validate_permission_ids(value)

    def to_dto(self) -> RoleUpdateDTO:
        return RoleUpdateDTO(**self.validated_data)
