from django.db import models
from django.core.exceptions import ValidationError

from core.base.models import ActivatableMixin, AuditMixin, BilingualNameMixin
from core.base.managers import ActivatableManager


class JobTitle(BilingualNameMixin, ActivatableMixin, AuditMixin, models.Model):
    """
    Job title, optionally scoped to a department.

    Fields:
    - code: Unique identifier
    - department: Owning department (null = usable everywhere)
    """
    code = models.CharField(max_length=50, unique=True, db_index=True)
    description = models.TextField(blank=True, default='')
    department = models.ForeignKey(
        'work_structures.Department',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='job_titles'
    )

    objects = ActivatableManager()

    class Meta:
        db_table = 'job_titles'
        verbose_name = 'Job Title'
        verbose_name_plural = 'Job Titles'
        ordering = ['code']

    def __str__(self):
        return f"{self.code} - {self.name_en}"

    def delete(self, *args, **kwargs):
        if self.users.exists():
            raise ValidationError(
                f"Cannot delete job title '{self.name_en}' because it is assigned to "
                f"{self.users.count()} user(s)"
            )
        return super().delete(*args, **kwargs)
