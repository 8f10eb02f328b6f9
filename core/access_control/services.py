"""
Service layer for roles and permission checks on the backend.
"""
import logging
from typing import List, Tuple

from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import Q

from core.access_control.actor import Actor
from core.access_control.catalog import PermissionKey
from core.access_control.dtos import RoleCreateDTO, RoleUpdateDTO
from core.access_control.evaluator import explain
from core.access_control.models import Permission, Role
from core.base.services import AuditedEntityService
from core.revisions.recorder import RevisionRecorder

logger = logging.getLogger(__name__)

ROLE_TRACKED_FIELDS = (
    'name_en', 'name_ar', 'description_en', 'description_ar',
    'is_active', 'has_full_access', 'is_super_admin', 'permissions',
)


def build_actor(user):
    """
    Actor snapshot for a Django user, or None for anonymous requests.

    Always rebuilt from the database so revoked grants take effect on the
    next request.
    """
    if user is None or not getattr(user, 'is_authenticated', False):
        return None
    return Actor.from_user(user)


def user_can_perform_action(user, module, action) -> Tuple[bool, str]:
    """
    Check if a user can perform an action on a module.

    Returns:
        Tuple of (allowed: bool, reason: str)
    """
    return explain(build_actor(user), module, action)


def resolve_permissions(permission_ids) -> List[Permission]:
    """
    Permission rows for a list of "module:action" ids.

    Duplicates collapse. Unknown ids, or ids not seeded yet, are rejected.
    """
    codes = []
    invalid = []
    for raw_id in permission_ids or []:
        key = PermissionKey.parse(raw_id)
        if key is None:
            invalid.append(str(raw_id))
        elif key.id not in codes:
            codes.append(key.id)
    if invalid:
        raise ValidationError({'permissions': f"Unknown permissions: {', '.join(invalid)}"})

    found = list(Permission.objects.filter(code__in=codes))
    missing = sorted(set(codes) - {p.code for p in found})
    if missing:
        raise ValidationError({
            'permissions': f"Permissions not initialized: {', '.join(missing)}. Run init_core_data."
        })
    return found


class RoleService(AuditedEntityService):
    """Service for Role business logic"""
    model = Role
    recorder = RevisionRecorder('Role', ROLE_TRACKED_FIELDS)

    @staticmethod
    def list_roles(filters: dict = None) -> models.QuerySet:
        """
        List roles with filtering.

        Args:
            filters: Dictionary of filters
                - search: matches names and descriptions
                - is_active: 'true' / 'false'

        Returns:
            QuerySet of Role objects
        """
        filters = filters or {}
        queryset = Role.objects.all().prefetch_related('permissions').order_by('name_en')

        search = filters.get('search')
        if search:
            queryset = queryset.filter(
                Q(name_en__icontains=search) |
                Q(name_ar__icontains=search) |
                Q(description_en__icontains=search) |
                Q(description_ar__icontains=search)
            )

        return queryset.filter_by_search_params({'is_active': filters.get('is_active')})

    @staticmethod
    @transaction.atomic
    def create(user, dto: RoleCreateDTO) -> Role:
        """
        Create new role with validation.

        Validates:
        - English name is present and unique (case-insensitive)
        - Every permission id exists in the catalog
        """
        name_en = (dto.name_en or '').strip()
        if not name_en:
            raise ValidationError({'name_en': 'Name is required'})
        if Role.objects.filter(name_en__iexact=name_en).exists():
            raise ValidationError({'name_en': f"Role '{name_en}' already exists"})

        permissions = resolve_permissions(dto.permissions)

        role = Role(
            name_en=name_en,
            name_ar=dto.name_ar or '',
            description_en=dto.description_en or '',
            description_ar=dto.description_ar or '',
            is_active=dto.is_active,
            has_full_access=dto.has_full_access,
            created_by=user,
            updated_by=user,
        )
        role.save()
        role.permissions.set(permissions)

        RoleService.recorder.record_create(role, actor=user)
        logger.info("Role #%s '%s' created by %s", role.pk, role.name_en, getattr(user, 'pk', None))
        return role

    @staticmethod
    @transaction.atomic
    def update(user, dto: RoleUpdateDTO) -> Role:
        """
        Update role fields and, when given, replace its permission set.

        The super-admin role keeps its override flags.
        """
        role = RoleService.get(dto.role_id)
        before = RoleService.recorder.snapshot(role)

        if dto.name_en is not None:
            name_en = dto.name_en.strip()
            if not name_en:
                raise ValidationError({'name_en': 'Name is required'})
            if Role.objects.filter(name_en__iexact=name_en).exclude(pk=role.pk).exists():
                raise ValidationError({'name_en': f"Role '{name_en}' already exists"})
            role.name_en = name_en
        for field_name in ('name_ar', 'description_en', 'description_ar'):
            value = getattr(dto, field_name)
            if value is not None:
                setattr(role, field_name, value)
        if dto.has_full_access is not None:
            if role.is_super_admin and not dto.has_full_access:
                raise ValidationError({'has_full_access': 'The super admin role always has full access'})
            role.has_full_access = dto.has_full_access

        role.updated_by = user
        role.save()
        if dto.permissions is not None:
            role.permissions.set(resolve_permissions(dto.permissions))

        RoleService.recorder.record_edit(role, before, actor=user)
        return role

    @classmethod
    def _delete_one(cls, user, instance):
        if instance.is_super_admin:
            raise ValidationError(f"Cannot delete system role '{instance.name_en}'")
        super()._delete_one(user, instance)

    @classmethod
    def _set_activity(cls, user, instance, is_active):
        if instance.is_super_admin and not is_active:
            raise ValidationError(f"Cannot deactivate system role '{instance.name_en}'")
        return super()._set_activity(user, instance, is_active)
