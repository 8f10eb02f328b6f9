"""
Revision Model
Append-only, field-level change log shared by every audited entity.
"""
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone


class Operation(models.TextChoices):
    CREATE = 'create', 'Create'
    EDIT = 'edit', 'Edit'
    DELETE = 'delete', 'Delete'


class RevisionQuerySet(models.QuerySet):

    def for_entity(self, entity_type, entity_id):
        return self.filter(entity_type=entity_type, entity_id=str(entity_id))

    def chronological(self):
        """Oldest first. The id breaks ties between revisions of one mutation."""
        return self.order_by('modification_date', 'id')

    def update(self, **kwargs):
        raise ValidationError("Revisions are immutable")

    def delete(self):
        raise ValidationError("Revisions are append-only and cannot be deleted")


class Revision(models.Model):
    """
    One immutable record of a change.

    - create: field_name is null, current_value holds the initial snapshot
    - edit: one row per changed field with previous/current values
    - delete: field_name is null, previous_value holds the final snapshot

    entity_id is stored as text so history survives the entity's deletion.
    """
    entity_type = models.CharField(max_length=50, db_index=True)
    entity_id = models.CharField(max_length=64)
    operation = models.CharField(max_length=10, choices=Operation.choices)
    field_name = models.CharField(max_length=100, null=True, blank=True)
    previous_value = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    current_value = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    modified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='revisions',
        help_text="Actor who made the change; null means the system. Authors cannot be deleted."
    )
    modification_date = models.DateTimeField(default=timezone.now, db_index=True)

    objects = RevisionQuerySet.as_manager()

    class Meta:
        db_table = 'revisions'
        verbose_name = 'Revision'
        verbose_name_plural = 'Revisions'
        ordering = ['modification_date', 'id']
        indexes = [
            models.Index(fields=['entity_type', 'entity_id', 'modification_date']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(operation='edit', field_name__isnull=False) |
                    models.Q(~models.Q(operation='edit'), field_name__isnull=True)
                ),
                name='revision_field_name_matches_operation'
            ),
        ]

    def __str__(self):
        target = f"{self.entity_type}#{self.entity_id}"
        if self.field_name:
            return f"{target} {self.operation} {self.field_name}"
        return f"{target} {self.operation}"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise ValidationError("Revisions are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Revisions are append-only and cannot be deleted")
