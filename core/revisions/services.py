from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from dateutil import parser as date_parser

from core.revisions.models import Operation, Revision


class RevisionService:
    """Read side of the revision log"""

    @staticmethod
    def get_entity_history(entity_type: str, entity_id) -> models.QuerySet:
        """
        Full history of one entity, oldest first.

        The order is (modification_date, id) on every call, so revisions
        written within the same mutation keep their insertion order.
        An entity without history yields an empty queryset.
        """
        return Revision.objects.for_entity(entity_type, entity_id).select_related(
            'modified_by'
        ).chronological()

    @staticmethod
    def list_model_history(entity_type: str, filters: dict = None) -> models.QuerySet:
        """
        History of every entity of one type.

        Args:
            entity_type: e.g. 'Department'
            filters: Dictionary of filters
                - operation: create / edit / delete
                - field_name: exact field name
                - modified_by: user ID
                - entity_id: entity ID
                - date_from / date_to: ISO date or datetime (inclusive)

        Returns:
            QuerySet of Revision objects, oldest first

        Raises:
            ValidationError: unknown operation or unparseable date
        """
        filters = filters or {}
        queryset = Revision.objects.filter(entity_type=entity_type).select_related('modified_by')

        operation = filters.get('operation')
        if operation:
            if operation not in Operation.values:
                raise ValidationError({'operation': f"Unknown operation '{operation}'"})
            queryset = queryset.filter(operation=operation)

        field_name = filters.get('field_name')
        if field_name:
            queryset = queryset.filter(field_name=field_name)

        modified_by = filters.get('modified_by')
        if modified_by:
            queryset = queryset.filter(modified_by_id=modified_by)

        entity_id = filters.get('entity_id')
        if entity_id:
            queryset = queryset.filter(entity_id=str(entity_id))

        date_from = filters.get('date_from')
        if date_from:
            queryset = queryset.filter(modification_date__gte=RevisionService._parse_date(date_from, 'date_from'))

        date_to = filters.get('date_to')
        if date_to:
            bound = RevisionService._parse_date(date_to, 'date_to')
            if 'T' not in str(date_to) and ' ' not in str(date_to).strip():
                # Plain dates include the whole day
                queryset = queryset.filter(modification_date__date__lte=bound.date())
            else:
                queryset = queryset.filter(modification_date__lte=bound)

        return queryset.chronological()

    @staticmethod
    def _parse_date(value, field):
        try:
            parsed = date_parser.isoparse(str(value))
        except (ValueError, OverflowError):
            raise ValidationError({field: f"Invalid date '{value}'"})
        if parsed.tzinfo is None:
            parsed = timezone.make_aware(parsed)
        return parsed
