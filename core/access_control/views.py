from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404

from console_project.pagination import auto_paginate
from console_project.response_formatter import validation_error_detail
from core.access_control.catalog import Action, Module, grouped_catalog
from core.access_control.decorators import require_permission
from core.access_control.models import Role
from core.access_control.serializers import (
    RoleCreateSerializer,
    RoleReadSerializer,
    RoleUpdateSerializer,
)
from core.access_control.services import RoleService
from core.base.views import activity_views
from core.revisions.views import history_views


@api_view(['GET'])
@require_permission(Module.ROLE_MANAGEMENT, Action.VIEW)
def permission_groups(request):
    """
    Permission catalog grouped by module.

    GET /permissions/groups/
    """
    return Response(grouped_catalog(), status=status.HTTP_200_OK)


@api_view(['GET', 'POST'])
@require_permission(Module.ROLE_MANAGEMENT)
@auto_paginate
def role_list(request):
    """
    List all roles or create a new role.

    GET /roles/
    - Filters: is_active (boolean)
    - Search: ?search=query (names and descriptions)

    POST /roles/
    - Body: name_en, name_ar, description_en, description_ar, is_active,
      has_full_access, permissions ["module:action", ...]
    """
    if request.method == 'GET':
        filters = {
            'search': request.query_params.get('search'),
            'is_active': request.query_params.get('is_active'),
        }
        roles = RoleService.list_roles(filters)
        serializer = RoleReadSerializer(roles, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    elif request.method == 'POST':
        serializer = RoleCreateSerializer(data=request.data)
        if serializer.is_valid():
            try:
                role = RoleService.create(request.user, serializer.to_dto())
                return Response(RoleReadSerializer(role).data, status=status.HTTP_201_CREATED)
            except ValidationError as e:
                return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@require_permission(Module.ROLE_MANAGEMENT)
def role_detail(request, pk):
    """
    Retrieve, update or delete a role.

    GET /roles/<pk>/
    PUT/PATCH /roles/<pk>/
    DELETE /roles/<pk>/  (refused while users are assigned)
    """
    role = get_object_or_404(Role.objects.prefetch_related('permissions'), pk=pk)

    if request.method == 'GET':
        return Response(RoleReadSerializer(role).data, status=status.HTTP_200_OK)

    elif request.method in ['PUT', 'PATCH']:
        data = request.data.copy()
        data['role_id'] = role.id

        serializer = RoleUpdateSerializer(data=data)
        if serializer.is_valid():
            try:
                updated_role = RoleService.update(request.user, serializer.to_dto())
                return Response(RoleReadSerializer(updated_role).data, status=status.HTTP_200_OK)
            except ValidationError as e:
                return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    elif request.method == 'DELETE':
        try:
            RoleService.delete(request.user, role.id)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except ValidationError as e:
            return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)


role_toggle_activity, role_bulk_delete, role_bulk_toggle = activity_views(
    RoleService, Module.ROLE_MANAGEMENT, RoleReadSerializer
)

role_model_history, role_entity_history = history_views('Role', Module.ROLE_MANAGEMENT)
