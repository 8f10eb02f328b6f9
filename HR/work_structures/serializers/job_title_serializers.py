"""
Serializers for JobTitle model
"""
from rest_framework import serializers
from HR.work_structures.models import JobTitle
from HR.work_structures.dtos import JobTitleCreateDTO, JobTitleUpdateDTO


class JobTitleReadSerializer(serializers.ModelSerializer):
    """Read serializer for JobTitle model"""
    department_id = serializers.IntegerField(source='department.id', read_only=True, allow_null=True)
    department_name_en = serializers.CharField(source='department.name_en', read_only=True, allow_null=True)
    department_name_ar = serializers.CharField(source='department.name_ar', read_only=True, allow_null=True)

    class Meta:
        model = JobTitle
        fields = [
            'id', 'code', 'name_en', 'name_ar', 'description',
            'department_id', 'department_name_en', 'department_name_ar',
            'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class JobTitleCreateSerializer(serializers.Serializer):
    """Write serializer for creating a job title"""
    code = serializers.CharField(max_length=50)
    name_en = serializers.CharField(max_length=255)
    name_ar = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    department_id = serializers.IntegerField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False, default=True)

    def to_dto(self) -> JobTitleCreateDTO:
        return JobTitleCreateDTO(**self.validated_data)


class JobTitleUpdateSerializer(serializers.Serializer):
    """Write serializer for updating a job title"""
    job_title_id = serializers.IntegerField()  # Primary Key
    code = serializers.CharField(max_length=50, required=False)
    name_en = serializers.CharField(max_length=255, required=False)
    name_ar = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    department_id = serializers.IntegerField(required=False, allow_null=True)

    def to_dto(self) -> JobTitleUpdateDTO:
        data = self.validated_data.copy()
        if 'department_id' in data and data['department_id'] is None:
            data['clear_department'] = True
        return JobTitleUpdateDTO(**data)
