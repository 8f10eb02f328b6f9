"""
History endpoints shared by every audited resource.

Each resource mounts the two views built by ``history_views``:

    GET /<resource>/history/                 model-wide, filtered, paginated
    GET /<resource>/history/entity/<id>/     one entity, oldest first
"""
from django.core.exceptions import ValidationError
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from console_project.pagination import paginate_queryset
from console_project.response_formatter import validation_error_detail
from core.access_control.catalog import Action
from core.access_control.decorators import require_permission
from core.revisions.serializers import RevisionFilterSerializer, RevisionReadSerializer
from core.revisions.services import RevisionService


def history_views(entity_type, module):
    """
    Build the (model_history, entity_history) views for one entity type.

    Both require ``<module>:view-history``.
    """

    @api_view(['GET'])
    @require_permission(module, Action.VIEW_HISTORY)
    def model_history(request):
        filter_serializer = RevisionFilterSerializer(data=request.query_params)
        if not filter_serializer.is_valid():
            return Response(filter_serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            revisions = RevisionService.list_model_history(entity_type, filter_serializer.validated_data)
        except ValidationError as e:
            return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)
        return paginate_queryset(request, revisions, RevisionReadSerializer)

    @api_view(['GET'])
    @require_permission(module, Action.VIEW_HISTORY)
    def entity_history(request, pk):
        revisions = RevisionService.get_entity_history(entity_type, pk)
        serializer = RevisionReadSerializer(revisions, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    model_history.__name__ = f"{entity_type.lower()}_model_history"
    entity_history.__name__ = f"{entity_type.lower()}_entity_history"
    return model_history, entity_history
