"""
Core Base Managers Module

Provides custom managers and querysets for base models.

**Architecture:**
- BaseQuerySet: Generic filtering (name/search/is_active)
- ActivatableQuerySet: For models with is_active field

Usage:
    from core.base.models import ActivatableMixin, BilingualNameMixin
    from core.base.managers import ActivatableManager

    class Department(BilingualNameMixin, ActivatableMixin, models.Model):
        objects = ActivatableManager()

    Department.objects.active().filter_by_search_params(request.query_params)
"""

from django.db import models
from django.db.models import Q


def parse_bool(value):
    """'true'/'1'/'yes' -> True, 'false'/'0'/'no' -> False, anything else -> None."""
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    lowered = str(value).strip().lower()
    if lowered in ('true', '1', 'yes'):
        return True
    if lowered in ('false', '0', 'no'):
        return False
    return None


class BaseQuerySet(models.QuerySet):
    """
    Base QuerySet with common filtering methods.

    Methods:
        - filter_by_search_params: Filter by name/search/is_active
    """

    search_fields = ('name_en', 'name_ar')

    def filter_by_search_params(self, query_params):
        """
        Apply standard filters from query parameters.

        Args:
            query_params: QueryDict or dict with optional keys:
                - name: Contains match on either name (case-insensitive)
                - search: Contains match across the search fields
                - is_active: 'true' / 'false'

        Returns:
            Filtered QuerySet
        """
        queryset = self

        name = query_params.get('name')
        if name:
            queryset = queryset.filter(Q(name_en__icontains=name) | Q(name_ar__icontains=name))

        search = query_params.get('search')
        if search:
            condition = Q()
            for field_name in self.search_fields:
                condition |= Q(**{f'{field_name}__icontains': search})
            queryset = queryset.filter(condition)

        is_active = parse_bool(query_params.get('is_active'))
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active)

        return queryset


class ActivatableQuerySet(BaseQuerySet):
    """
    QuerySet for ActivatableMixin models.

    Methods:
        - active(): Return is_active=True records
    """

    def active(self):
        return self.filter(is_active=True)


class ActivatableManager(models.Manager.from_queryset(ActivatableQuerySet)):
    """
    Manager for ActivatableMixin models.

    Usage:
        Department.objects.active()
    """
    pass
