"""
Shared service behavior for audited, activatable entities.

Concrete services set ``model`` and ``recorder`` and implement their own
create/update; deletion, activity toggling and the bulk variants live here.
Every mutation records its revisions inside the same transaction.
"""
import logging
from typing import Iterable, List

from django.core.exceptions import ValidationError
from django.db import transaction

logger = logging.getLogger(__name__)


def normalize_ids(ids) -> List[int]:
    """De-duplicate a selection of ids, keeping the caller's order."""
    if not ids:
        raise ValidationError({'ids': 'Select at least one item'})
    if isinstance(ids, (str, bytes)) or not isinstance(ids, Iterable):
        raise ValidationError({'ids': 'Expected a list of ids'})
    normalized = []
    for raw in ids:
        try:
            value = int(raw)
        except (TypeError, ValueError):
            raise ValidationError({'ids': f"Invalid id '{raw}'"})
        if value not in normalized:
            normalized.append(value)
    return normalized


class AuditedEntityService:
    """
    Base for services whose entities carry ``is_active`` and a revision log.

    Subclasses define:
        model: the Django model
        recorder: a RevisionRecorder for the entity type
    """
    model = None
    recorder = None

    @classmethod
    def get(cls, pk):
        try:
            return cls.model.objects.get(pk=pk)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            raise ValidationError(f"{cls.model._meta.verbose_name} with id {pk} not found")

    @classmethod
    def _locked_selection(cls, ids):
        """
        Load every selected row or fail before anything is mutated.

        Raises:
            ValidationError: listing the ids that do not exist
        """
        ids = normalize_ids(ids)
        found = {obj.pk: obj for obj in cls.model.objects.select_for_update().filter(pk__in=ids)}
        missing = [pk for pk in ids if pk not in found]
        if missing:
            raise ValidationError({
                'ids': f"{cls.model._meta.verbose_name_plural} not found: "
                       f"{', '.join(str(pk) for pk in missing)}"
            })
        return [found[pk] for pk in ids]

    @classmethod
    def _delete_one(cls, user, instance):
        entity_id = instance.pk
        cls.recorder.record_delete(instance, actor=user)
        instance.delete()
        logger.info("%s #%s deleted by %s", cls.recorder.entity_type, entity_id, getattr(user, 'pk', None))

    @classmethod
    def _set_activity(cls, user, instance, is_active):
        if instance.is_active == is_active:
            return instance
        before = cls.recorder.snapshot(instance)
        instance.is_active = is_active
        if hasattr(instance, 'updated_by'):
            instance.updated_by = user
        instance.save()
        cls.recorder.record_edit(instance, before, actor=user)
        return instance

    @classmethod
    @transaction.atomic
    def delete(cls, user, pk):
        """Hard delete. The delete revision keeps the final snapshot."""
        instance = cls.get(pk)
        cls._delete_one(user, instance)

    @classmethod
    @transaction.atomic
    def toggle_activity(cls, user, pk):
        """Flip ``is_active``. Returns the updated instance."""
        instance = cls.get(pk)
        return cls._set_activity(user, instance, not instance.is_active)

    @classmethod
    @transaction.atomic
    def bulk_delete(cls, user, ids) -> int:
        """
        Delete every selected entity, or none of them.

        Missing ids fail the whole call before any deletion; a failure while
        deleting (e.g. a protected relation) rolls back the deletions already
        made in this call.

        Returns:
            Number of deleted entities
        """
        selection = cls._locked_selection(ids)
        for instance in selection:
            cls._delete_one(user, instance)
        return len(selection)

    @classmethod
    @transaction.atomic
    def bulk_toggle(cls, user, ids, is_active) -> int:
        """
        Set ``is_active`` on every selected entity, or on none of them.

        Returns:
            Number of entities whose status changed
        """
        if not isinstance(is_active, bool):
            raise ValidationError({'is_active': 'Must be true or false'})
        selection = cls._locked_selection(ids)
        changed = 0
        for instance in selection:
            if instance.is_active != is_active:
                cls._set_activity(user, instance, is_active)
                changed += 1
        return changed
