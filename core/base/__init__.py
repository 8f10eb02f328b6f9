"""
Core Base Module

Provides shared base classes, mixins, and utilities for all console modules.

**Architecture:**
Each feature is a separate mixin that can be composed together.

Exports (import from the submodules; this package stays import-light so the
Django-free helpers in ``core.base.text`` work without settings):

    core.base.models:
        - AuditMixin: Adds created_at, updated_at, created_by, updated_by
        - BilingualNameMixin: Adds name_en, name_ar, localized_name()
        - ActivatableMixin: Adds is_active

    core.base.managers:
        - BaseQuerySet: Base queryset with filter_by_search_params
        - ActivatableQuerySet: QuerySet with active()/inactive() filters
        - ActivatableManager: Manager for ActivatableMixin models

    core.base.text:
        - localized_text / normalize_locale

Usage Examples:

    from core.base.models import AuditMixin, ActivatableMixin, BilingualNameMixin
    from core.base.managers import ActivatableManager

    class Department(BilingualNameMixin, ActivatableMixin, AuditMixin, models.Model):
        code = models.CharField(max_length=50, unique=True)
        objects = ActivatableManager()
"""
