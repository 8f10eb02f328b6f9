"""
Serializers for Department model
"""
from rest_framework import serializers
from HR.work_structures.models import Department
from HR.work_structures.dtos import DepartmentCreateDTO, DepartmentUpdateDTO


class DepartmentReadSerializer(serializers.ModelSerializer):
    """Read serializer for Department model"""
    parent_id = serializers.IntegerField(source='parent.id', read_only=True, allow_null=True)
    parent_name_en = serializers.CharField(source='parent.name_en', read_only=True, allow_null=True)
    parent_name_ar = serializers.CharField(source='parent.name_ar', read_only=True, allow_null=True)

    class Meta:
        model = Department
        fields = [
            'id', 'code', 'name_en', 'name_ar', 'description',
            'parent_id', 'parent_name_en', 'parent_name_ar',
            'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class DepartmentCreateSerializer(serializers.Serializer):
    """Write serializer for creating a department"""
    code = serializers.CharField(max_length=50)
    name_en = serializers.CharField(max_length=255)
    name_ar = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    parent_id = serializers.IntegerField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False, default=True)

    def to_dto(self) -> DepartmentCreateDTO:
        return DepartmentCreateDTO(**self.validated_data)


class DepartmentUpdateSerializer(serializers.Serializer):
    """Write serializer for updating a department; parent_id null moves it to the top level"""
    department_id = serializers.IntegerField()  # Primary Key
    code = serializers.CharField(max_length=50, required=False)
    name_en = serializers.CharField(max_length=255, required=False)
    name_ar = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    parent_id = serializers.IntegerField(required=False, allow_null=True)

    def to_dto(self) -> DepartmentUpdateDTO:
        data = self.validated_data.copy()
        if 'parent_id' in data and data['parent_id'] is None:
            data['clear_parent'] = True
        return DepartmentUpdateDTO(**data)
