"""
Revision recorder.

Services call these helpers inside their ``transaction.atomic`` blocks so a
mutation and its revisions commit or roll back together.
"""
import datetime
import decimal
import logging
import uuid

from django.db import models

from core.revisions.models import Operation, Revision

logger = logging.getLogger(__name__)


def _reference(obj):
    """Related objects are stored as a small display dict."""
    if obj is None:
        return None
    return {
        'id': obj.pk,
        'name_en': getattr(obj, 'name_en', None) or str(obj),
        'name_ar': getattr(obj, 'name_ar', None) or None,
    }


def _json_safe(value):
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, decimal.Decimal):
        return str(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, models.Model):
        return _reference(value)
    return value


def snapshot(instance, fields):
    """
    Capture the tracked fields of ``instance`` as JSON-safe values.

    Foreign keys become ``{id, name_en, name_ar}``; many-to-many fields become
    a sorted list of codes (or string forms when the target has no code).
    """
    data = {}
    for field_name in fields:
        field = instance._meta.get_field(field_name)
        if field.many_to_many:
            if instance.pk is None:
                data[field_name] = []
                continue
            related = getattr(instance, field_name).all()
            data[field_name] = sorted(getattr(obj, 'code', None) or str(obj) for obj in related)
        elif field.is_relation:
            data[field_name] = _reference(getattr(instance, field_name))
        else:
            data[field_name] = _json_safe(getattr(instance, field_name))
    return data


class RevisionRecorder:
    """
    Writes revisions for one entity type.

    Usage:
        recorder = RevisionRecorder("Department", TRACKED_FIELDS)
        before = recorder.snapshot(department)
        ... mutate ...
        recorder.record_edit(department, before, actor=user)
    """

    def __init__(self, entity_type, fields):
        self.entity_type = entity_type
        self.fields = tuple(fields)

    def snapshot(self, instance):
        return snapshot(instance, self.fields)

    def _actor(self, actor):
        # Anonymous users and plain ids are not stored as actors
        if actor is None or not getattr(actor, 'is_authenticated', False):
            return None
        return actor

    def record_create(self, instance, actor=None):
        revision = Revision.objects.create(
            entity_type=self.entity_type,
            entity_id=str(instance.pk),
            operation=Operation.CREATE,
            current_value=self.snapshot(instance),
            modified_by=self._actor(actor),
        )
        logger.debug(
            "Revision recorded: %s#%s create by %s",
            self.entity_type, instance.pk, getattr(actor, 'pk', None) or 'system'
        )
        return revision

    def record_edit(self, instance, before, actor=None):
        """
        One revision per tracked field whose value changed.

        Returns the created revisions (empty when nothing changed).
        """
        after = self.snapshot(instance)
        modified_by = self._actor(actor)
        revisions = []
        for field_name in self.fields:
            previous = before.get(field_name)
            current = after.get(field_name)
            if previous == current:
                continue
            revisions.append(Revision.objects.create(
                entity_type=self.entity_type,
                entity_id=str(instance.pk),
                operation=Operation.EDIT,
                field_name=field_name,
                previous_value=previous,
                current_value=current,
                modified_by=modified_by,
            ))
        if revisions:
            logger.debug(
                "Revision recorded: %s#%s edit (%s) by %s",
                self.entity_type, instance.pk,
                ', '.join(r.field_name for r in revisions),
                getattr(actor, 'pk', None) or 'system'
            )
        return revisions

    def record_secret_change(self, instance, field_name, actor=None):
        """Edit revision for a field whose values must not be stored (passwords)."""
        return Revision.objects.create(
            entity_type=self.entity_type,
            entity_id=str(instance.pk),
            operation=Operation.EDIT,
            field_name=field_name,
            modified_by=self._actor(actor),
        )

    def record_delete(self, instance, actor=None, entity_id=None):
        """Call before the row is deleted so the snapshot can still be read."""
        entity_id = entity_id if entity_id is not None else instance.pk
        revision = Revision.objects.create(
            entity_type=self.entity_type,
            entity_id=str(entity_id),
            operation=Operation.DELETE,
            previous_value=self.snapshot(instance),
            modified_by=self._actor(actor),
        )
        logger.debug(
            "Revision recorded: %s#%s delete by %s",
            self.entity_type, entity_id, getattr(actor, 'pk', None) or 'system'
        )
        return revision
