from django.db import models
from django.core.exceptions import ValidationError

from core.base.models import ActivatableMixin, AuditMixin, BilingualNameMixin
from core.base.managers import ActivatableManager


class Department(BilingualNameMixin, ActivatableMixin, AuditMixin, models.Model):
    """
    Organizational unit.

    Departments form a tree through ``parent``. A department with children,
    job titles or users cannot be deleted; deactivate it instead.

    Mixins:
    - BilingualNameMixin: name_en / name_ar
    - ActivatableMixin: is_active
    - AuditMixin: Tracks created_by, updated_by, created_at, updated_at
    """
    code = models.CharField(
        max_length=50,
        unique=True,
        db_index=True,
        help_text="Unique department code"
    )
    description = models.TextField(blank=True, default='')
    parent = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='children',
        help_text="Parent department (null for top-level departments)"
    )

    objects = ActivatableManager()

    class Meta:
        db_table = 'departments'
        verbose_name = 'Department'
        verbose_name_plural = 'Departments'
        ordering = ['code']

    def __str__(self):
        return f"{self.code} - {self.name_en}"

    def ancestor_ids(self):
        """IDs from the parent up to the root."""
        ids = []
        current = self.parent
        while current is not None:
            if current.pk in ids:
                break
            ids.append(current.pk)
            current = current.parent
        return ids

    def clean(self):
        if self.pk and self.parent_id == self.pk:
            raise ValidationError({'parent': 'A department cannot be its own parent'})
        if self.pk and self.parent_id and self.pk in self.parent.ancestor_ids():
            raise ValidationError({'parent': 'Parent would create a cycle'})

    def delete(self, *args, **kwargs):
        """
        Prevent deletion while anything still points at this department.
        """
        blockers = []
        if self.children.exists():
            blockers.append(f"{self.children.count()} sub-department(s)")
        if self.job_titles.exists():
            blockers.append(f"{self.job_titles.count()} job title(s)")
        if self.users.exists():
            blockers.append(f"{self.users.count()} user(s)")
        if blockers:
            raise ValidationError(
                f"Cannot delete department '{self.name_en}' because it has {', '.join(blockers)}"
            )
        return super().delete(*args, **kwargs)
