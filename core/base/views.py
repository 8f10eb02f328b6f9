"""
Activity and bulk endpoints shared by every AuditedEntityService resource.

    POST /<resource>/<id>/toggle-activity/   <module>:toggle-activity
    POST /<resource>/bulk-delete/            <module>:delete
    POST /<resource>/bulk-toggle/            <module>:toggle-activity

Bulk endpoints check the same permission as the single-entity action and
mutate all selected rows or none of them.
"""
from django.core.exceptions import ValidationError
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from console_project.response_formatter import success_response, validation_error_detail
from core.access_control.catalog import Action
from core.access_control.decorators import require_permission
from core.base.serializers import BulkDeleteSerializer, BulkToggleSerializer


def activity_views(service, module, read_serializer_class):
    """Build the (toggle_activity, bulk_delete, bulk_toggle) views for one resource."""
    label = service.model._meta.verbose_name_plural.lower()

    @api_view(['POST'])
    @require_permission(module, Action.TOGGLE_ACTIVITY)
    def toggle_activity(request, pk):
        try:
            instance = service.toggle_activity(request.user, pk)
        except ValidationError as e:
            return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)
        return Response(read_serializer_class(instance).data, status=status.HTTP_200_OK)

    @api_view(['POST'])
    @require_permission(module, Action.DELETE)
    def bulk_delete(request):
        serializer = BulkDeleteSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            deleted = service.bulk_delete(request.user, serializer.validated_data['ids'])
        except ValidationError as e:
            return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)
        return success_response(data={'deleted': deleted}, message=f"{deleted} {label} deleted")

    @api_view(['POST'])
    @require_permission(module, Action.TOGGLE_ACTIVITY)
    def bulk_toggle(request):
        serializer = BulkToggleSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            changed = service.bulk_toggle(
                request.user,
                serializer.validated_data['ids'],
                serializer.validated_data['is_active'],
            )
        except ValidationError as e:
            return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)
        state = 'activated' if serializer.validated_data['is_active'] else 'deactivated'
        return success_response(data={'updated': changed}, message=f"{changed} {label} {state}")

    prefix = service.recorder.entity_type.lower()
    toggle_activity.__name__ = f"{prefix}_toggle_activity"
    bulk_delete.__name__ = f"{prefix}_bulk_delete"
    bulk_toggle.__name__ = f"{prefix}_bulk_toggle"
    return toggle_activity, bulk_delete, bulk_toggle
