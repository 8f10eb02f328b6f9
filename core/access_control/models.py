"""
Roles and Permissions Models
Stores the permission catalog and the roles that grant it.
"""
from django.db import models
from django.core.exceptions import ValidationError

from core.access_control.catalog import Action, Module, PermissionKey
from core.base.managers import ActivatableManager
from core.base.models import ActivatableMixin, AuditMixin, BilingualNameMixin


class Permission(models.Model):
    """
    One (module, action) pair from the catalog.

    Rows are created by ``init_core_data`` from ``catalog.ALL_PERMISSIONS``;
    ``code`` is the "<module>:<action>" wire form.
    """
    code = models.CharField(max_length=100, unique=True, db_index=True)
    module = models.CharField(max_length=50, choices=[(m.value, m.value) for m in Module])
    action = models.CharField(max_length=50, choices=[(a.value, a.value) for a in Action])
    name_en = models.CharField(max_length=255)
    name_ar = models.CharField(max_length=255, blank=True, default='')

    class Meta:
        db_table = 'permissions'
        verbose_name = 'Permission'
        verbose_name_plural = 'Permissions'
        ordering = ['module', 'action']
        unique_together = ('module', 'action')

    def __str__(self):
        return self.code

    @property
    def key(self):
        return PermissionKey.parse(self.code)

    def clean(self):
        key = PermissionKey.coerce(self.module, self.action)
        if key is None:
            raise ValidationError({'code': f"'{self.module}:{self.action}' is not in the permission catalog"})
        if self.code != key.id:
            raise ValidationError({'code': f"Code must be '{key.id}'"})


class Role(BilingualNameMixin, ActivatableMixin, AuditMixin, models.Model):
    """
    Role granting a set of permissions to the users assigned to it.

    Override flags:
    - has_full_access: every permission is implicitly granted
    - is_super_admin: same effect, tracked as a separate provenance flag
    """
    code = models.CharField(
        max_length=100,
        unique=True,
        null=True,
        blank=True,
        help_text="Stable identifier for system roles (e.g. 'super-admin')"
    )
    description_en = models.TextField(blank=True, default='')
    description_ar = models.TextField(blank=True, default='')
    has_full_access = models.BooleanField(default=False)
    is_super_admin = models.BooleanField(default=False)
    permissions = models.ManyToManyField(Permission, blank=True, related_name='roles')

    objects = ActivatableManager()

    class Meta:
        db_table = 'roles'
        verbose_name = 'Role'
        verbose_name_plural = 'Roles'
        ordering = ['name_en']

    def __str__(self):
        return self.name_en

    def permission_ids(self):
        return sorted(self.permissions.values_list('code', flat=True))

    def delete(self, *args, **kwargs):
        """
        Prevent deletion if role is assigned to users.
        Users must be reassigned first.
        """
        if self.users.exists():
            raise ValidationError(
                f"Cannot delete role '{self.name_en}' because it is assigned to "
                f"{self.users.count()} user(s)"
            )
        return super().delete(*args, **kwargs)
