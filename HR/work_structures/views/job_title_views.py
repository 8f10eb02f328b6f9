from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404

from HR.work_structures.services.job_title_service import JobTitleService
from HR.work_structures.serializers.job_title_serializers import (
    JobTitleReadSerializer,
    JobTitleCreateSerializer,
    JobTitleUpdateSerializer
)
from HR.work_structures.models import JobTitle
from core.access_control.catalog import Module
from core.access_control.decorators import require_permission
from core.base.views import activity_views
from core.revisions.views import history_views

from console_project.pagination import auto_paginate
from console_project.response_formatter import validation_error_detail


@api_view(['GET', 'POST'])
@require_permission(Module.JOB_TITLE_MANAGEMENT)
@auto_paginate
def job_title_list(request):
    """
    List all job titles or create a new one.

    GET /job-titles/
    - Filters: department (ID), is_active (boolean)
    - Search: ?search=query

    POST /job-titles/
    """
    if request.method == 'GET':
        filters = {
            'department': request.query_params.get('department'),
            'search': request.query_params.get('search'),
            'is_active': request.query_params.get('is_active'),
        }
        job_titles = JobTitleService.list_job_titles(filters)
        serializer = JobTitleReadSerializer(job_titles, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    elif request.method == 'POST':
        serializer = JobTitleCreateSerializer(data=request.data)
        if serializer.is_valid():
            try:
                job_title = JobTitleService.create(request.user, serializer.to_dto())
                return Response(JobTitleReadSerializer(job_title).data, status=status.HTTP_201_CREATED)
            except ValidationError as e:
                return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@require_permission(Module.JOB_TITLE_MANAGEMENT)
def job_title_detail(request, pk):
    """
    Retrieve, update or delete a job title.

    GET /job-titles/<pk>/
    PUT/PATCH /job-titles/<pk>/
    DELETE /job-titles/<pk>/
    """
    job_title = get_object_or_404(JobTitle.objects.select_related('department'), pk=pk)

    if request.method == 'GET':
        return Response(JobTitleReadSerializer(job_title).data, status=status.HTTP_200_OK)

    elif request.method in ['PUT', 'PATCH']:
        data = request.data.copy()
        data['job_title_id'] = job_title.id

        serializer = JobTitleUpdateSerializer(data=data)
        if serializer.is_valid():
            try:
                updated = JobTitleService.update(request.user, serializer.to_dto())
                return Response(JobTitleReadSerializer(updated).data, status=status.HTTP_200_OK)
            except ValidationError as e:
                return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    elif request.method == 'DELETE':
        try:
            JobTitleService.delete(request.user, job_title.id)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except ValidationError as e:
            return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)


job_title_toggle_activity, job_title_bulk_delete, job_title_bulk_toggle = activity_views(
    JobTitleService, Module.JOB_TITLE_MANAGEMENT, JobTitleReadSerializer
)

job_title_model_history, job_title_entity_history = history_views(
    'JobTitle', Module.JOB_TITLE_MANAGEMENT
)
