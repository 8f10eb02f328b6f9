from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404

from HR.work_structures.services.department_service import DepartmentService
from HR.work_structures.serializers.department_serializers import (
    DepartmentReadSerializer,
    DepartmentCreateSerializer,
    DepartmentUpdateSerializer
)
from HR.work_structures.models import Department
from core.access_control.catalog import Module
from core.access_control.decorators import require_permission
from core.base.views import activity_views
from core.revisions.views import history_views

from console_project.pagination import auto_paginate
from console_project.response_formatter import validation_error_detail


@api_view(['GET', 'POST'])
@require_permission(Module.DEPARTMENT_MANAGEMENT)
@auto_paginate
def department_list(request):
    """
    List all departments or create a new department.

    GET /departments/
    - Filters: parent (ID or 'root'), is_active (boolean)
    - Search: ?search=query (code, name_en, name_ar)

    POST /departments/
    - Create new department using DTO pattern
    """
    if request.method == 'GET':
        filters = {
            'parent': request.query_params.get('parent'),
            'search': request.query_params.get('search'),
            'is_active': request.query_params.get('is_active'),
        }
        departments = DepartmentService.list_departments(filters)
        serializer = DepartmentReadSerializer(departments, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    elif request.method == 'POST':
        serializer = DepartmentCreateSerializer(data=request.data)
        if serializer.is_valid():
            try:
                department = DepartmentService.create(request.user, serializer.to_dto())
                return Response(DepartmentReadSerializer(department).data, status=status.HTTP_201_CREATED)
            except ValidationError as e:
                return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@require_permission(Module.DEPARTMENT_MANAGEMENT)
def department_detail(request, pk):
    """
    Retrieve, update or delete a department.

    GET /departments/<pk>/
    PUT/PATCH /departments/<pk>/
    DELETE /departments/<pk>/  (refused while sub-departments, job titles or users reference it)
    """
    department = get_object_or_404(Department.objects.select_related('parent'), pk=pk)

    if request.method == 'GET':
        return Response(DepartmentReadSerializer(department).data, status=status.HTTP_200_OK)

    elif request.method in ['PUT', 'PATCH']:
        data = request.data.copy()
        data['department_id'] = department.id

        serializer = DepartmentUpdateSerializer(data=data)
        if serializer.is_valid():
            try:
                updated = DepartmentService.update(request.user, serializer.to_dto())
                return Response(DepartmentReadSerializer(updated).data, status=status.HTTP_200_OK)
            except ValidationError as e:
                return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    elif request.method == 'DELETE':
        try:
            DepartmentService.delete(request.user, department.id)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except ValidationError as e:
            return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)


department_toggle_activity, department_bulk_delete, department_bulk_toggle = activity_views(
    DepartmentService, Module.DEPARTMENT_MANAGEMENT, DepartmentReadSerializer
)

department_model_history, department_entity_history = history_views(
    'Department', Module.DEPARTMENT_MANAGEMENT
)
