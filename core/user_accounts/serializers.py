from rest_framework import serializers

from core.access_control.catalog import PermissionKey
from core.access_control.evaluator import accessible_modules, grouped_permissions
from core.access_control.services import build_actor
from core.user_accounts.dtos import UserCreateDTO, UserUpdateDTO
from core.user_accounts.models import CustomUser


class ReferenceSerializer(serializers.Serializer):
    """{id, name_en, name_ar} for related objects"""
    id = serializers.IntegerField(read_only=True)
    name_en = serializers.CharField(read_only=True)
    name_ar = serializers.CharField(read_only=True)


class UserReadSerializer(serializers.ModelSerializer):
    """Read serializer for user management"""
    role = ReferenceSerializer(read_only=True, allow_null=True)
    department = ReferenceSerializer(read_only=True, allow_null=True)
    job_title = ReferenceSerializer(read_only=True, allow_null=True)
    permissions = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = [
            'id', 'email', 'username', 'name_en', 'name_ar', 'phone',
            'is_active', 'has_full_access', 'role', 'department', 'job_title',
            'permissions', 'last_login', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_permissions(self, obj):
        return sorted(p.code for p in obj.direct_permissions.all())


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})


def actor_payload(user):
    """
    The ``me`` payload: normalized actor plus derived views of its grants.
    """
    actor = build_actor(user)
    payload = actor.to_payload()
    payload['phone'] = user.phone
    payload['department'] = ReferenceSerializer(user.department).data if user.department else None
    payload['job_title'] = ReferenceSerializer(user.job_title).data if user.job_title else None
    payload['grouped_permissions'] = grouped_permissions(actor)
    payload['accessible_modules'] = [module.value for module in accessible_modules(actor)]
    return payload


def _validate_permission_ids(value):
    invalid = [item for item in value if PermissionKey.parse(item) is None]
    if invalid:
        raise serializers.ValidationError(f"Unknown permissions: {', '.join(invalid)}")
    return value


class UserCreateSerializer(serializers.Serializer):
    """Write serializer for creating a user"""
    email = serializers.EmailField()
    name_en = serializers.CharField(max_length=255)
    name_ar = serializers.CharField(max_length=255, required=False, allow_blank=True)
    username = serializers.CharField(max_length=150, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    is_active = serializers.BooleanField(required=False, default=True)
    has_full_access = serializers.BooleanField(required=False, default=False)
    role_id = serializers.IntegerField(required=False, allow_null=True)
    department_id = serializers.IntegerField(required=False, allow_null=True)
    job_title_id = serializers.IntegerField(required=False, allow_null=True)
    permissions = serializers.ListField(child=serializers.CharField(), required=False, default=list)

    def validate_permissions(self, value):
        return _validate_permission_ids(value)

    def to_dto(self) -> UserCreateDTO:
        return UserCreateDTO(**self.validated_data)


class UserUpdateSerializer(serializers.Serializer):
    """Write serializer for updating a user; null role/department/job title clears it"""
    user_id = serializers.IntegerField()  # Primary Key
    email = serializers.EmailField(required=False)
    name_en = serializers.CharField(max_length=255, required=False)
    name_ar = serializers.CharField(max_length=255, required=False, allow_blank=True)
    username = serializers.CharField(max_length=150, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    password = serializers.CharField(write_only=True, required=False, style={'input_type': 'password'})
    has_full_access = serializers.BooleanField(required=False)
    role_id = serializers.IntegerField(required=False, allow_null=True)
    department_id = serializers.IntegerField(required=False, allow_null=True)
    job_title_id = serializers.IntegerField(required=False, allow_null=True)
    permissions = serializers.ListField(child=serializers.CharField(), required=False)

    def validate_permissions(self, value):
        return _validate_permission_ids(value)

    def to_dto(self) -> UserUpdateDTO:
        data = self.validated_data.copy()
        for relation in ('role', 'department', 'job_title'):
            key = f'{relation}_id'
            if key in data and data[key] is None:
                data[f'clear_{relation}'] = True
        return UserUpdateDTO(**data)
