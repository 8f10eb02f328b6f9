from django.db import models
from django.conf import settings

from core.base.text import localized_text


class AuditMixin(models.Model):
    """
    Adds audit fields to track creation and modification metadata.

    Fields:
        - created_at: Timestamp when record was created
        - updated_at: Timestamp when record was last modified
        - created_by: User who created the record (optional)
        - updated_by: User who last modified the record (optional)

    Usage:
        class MyModel(AuditMixin):
            name_en = models.CharField(max_length=100)

    Note: created_by and updated_by are set by the service layer.
    Field-level history lives in core.revisions, not here.
    """
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Timestamp when record was created"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Timestamp when record was last modified"
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_created',
        help_text="User who created this record"
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_updated',
        help_text="User who last updated this record"
    )

    class Meta:
        abstract = True


class BilingualNameMixin(models.Model):
    """
    English/Arabic display name pair.

    Fields:
        - name_en: English name
        - name_ar: Arabic name
    """
    name_en = models.CharField(max_length=255, help_text="Name (English)")
    name_ar = models.CharField(max_length=255, blank=True, default='', help_text="Name (Arabic)")

    class Meta:
        abstract = True

    def localized_name(self, locale='en'):
        return localized_text(self.name_en, self.name_ar, locale) or str(self.pk)


class ActivatableMixin(models.Model):
    """
    Mixin for models that are soft-disabled instead of deleted.

    Fields:
        - is_active: False hides the record from day-to-day use

    Activity changes go through the owning service's toggle method so that
    each flip is recorded as a revision.
    """
    is_active = models.BooleanField(
        default=True,
        help_text="Record status. Set to False instead of deleting."
    )

    class Meta:
        abstract = True
