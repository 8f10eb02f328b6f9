"""
Service layer for user management.
"""
import logging

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import Q

from core.access_control.models import Role
from core.access_control.services import resolve_permissions
from core.base.services import AuditedEntityService
from core.revisions.recorder import RevisionRecorder
from core.user_accounts.dtos import UserCreateDTO, UserUpdateDTO
from core.user_accounts.models import CustomUser
from HR.work_structures.models import Department, JobTitle

logger = logging.getLogger(__name__)

USER_TRACKED_FIELDS = (
    'email', 'username', 'name_en', 'name_ar', 'phone', 'is_active',
    'has_full_access', 'role', 'department', 'job_title', 'direct_permissions',
)


def _get_active(model, pk, field):
    try:
        obj = model.objects.get(pk=pk)
    except model.DoesNotExist:
        raise ValidationError({field: f"{model._meta.verbose_name} with id {pk} not found"})
    if not obj.is_active:
        raise ValidationError({field: f"{model._meta.verbose_name} '{obj.name_en}' is inactive"})
    return obj


class UserService(AuditedEntityService):
    """Service for user business logic"""
    model = CustomUser
    recorder = RevisionRecorder('User', USER_TRACKED_FIELDS)

    @staticmethod
    def list_users(filters: dict = None) -> models.QuerySet:
        """
        List users with filtering.

        Args:
            filters: Dictionary of filters
                - role: role ID
                - department: department ID
                - search: matches email, username and names
                - is_active: 'true' / 'false'
        """
        filters = filters or {}
        queryset = CustomUser.objects.all().select_related(
            'role', 'department', 'job_title'
        ).prefetch_related('direct_permissions').order_by('name_en')

        role = filters.get('role')
        if role:
            queryset = queryset.filter(role_id=role)

        department = filters.get('department')
        if department:
            queryset = queryset.filter(department_id=department)

        search = filters.get('search')
        if search:
            queryset = queryset.filter(
                Q(email__icontains=search) |
                Q(username__icontains=search) |
                Q(name_en__icontains=search) |
                Q(name_ar__icontains=search)
            )

        is_active = filters.get('is_active')
        if is_active is not None and str(is_active).lower() in ('true', 'false'):
            queryset = queryset.filter(is_active=str(is_active).lower() == 'true')

        return queryset

    @staticmethod
    def _check_email(email, exclude_pk=None):
        email = CustomUser.objects.normalize_email((email or '').strip())
        if not email:
            raise ValidationError({'email': 'Email is required'})
        queryset = CustomUser.objects.filter(email__iexact=email)
        if exclude_pk is not None:
            queryset = queryset.exclude(pk=exclude_pk)
        if queryset.exists():
            raise ValidationError({'email': 'Email already registered'})
        return email

    @staticmethod
    def _check_password(password, user=None):
        try:
            validate_password(password, user)
        except ValidationError as e:
            raise ValidationError({'password': e.messages})

    @staticmethod
    @transaction.atomic
    def create(user, dto: UserCreateDTO) -> CustomUser:
        """
        Create new user with validation.

        Validates:
        - Email is unique
        - Password passes the configured validators
        - Role, department and job title exist and are active
        - Direct permissions exist in the catalog
        """
        email = UserService._check_email(dto.email)
        if not (dto.name_en or '').strip():
            raise ValidationError({'name_en': 'Name is required'})
        UserService._check_password(dto.password)

        role = _get_active(Role, dto.role_id, 'role_id') if dto.role_id is not None else None
        department = (
            _get_active(Department, dto.department_id, 'department_id')
            if dto.department_id is not None else None
        )
        job_title = (
            _get_active(JobTitle, dto.job_title_id, 'job_title_id')
            if dto.job_title_id is not None else None
        )
        permissions = resolve_permissions(dto.permissions)

        new_user = CustomUser.objects.create_user(
            email=email,
            name_en=dto.name_en.strip(),
            password=dto.password,
            name_ar=dto.name_ar or '',
            username=dto.username or email.split('@')[0],
            phone=dto.phone or '',
            is_active=dto.is_active,
            has_full_access=dto.has_full_access,
            role=role,
            department=department,
            job_title=job_title,
        )
        new_user.direct_permissions.set(permissions)

        UserService.recorder.record_create(new_user, actor=user)
        logger.info("User #%s <%s> created by %s", new_user.pk, new_user.email, getattr(user, 'pk', None))
        return new_user

    @staticmethod
    @transaction.atomic
    def update(user, dto: UserUpdateDTO) -> CustomUser:
        """
        Update user fields. A password change is recorded without its values.
        """
        target = UserService.get(dto.user_id)
        before = UserService.recorder.snapshot(target)

        if dto.email is not None:
            target.email = UserService._check_email(dto.email, exclude_pk=target.pk)
        if dto.name_en is not None:
            if not dto.name_en.strip():
                raise ValidationError({'name_en': 'Name is required'})
            target.name_en = dto.name_en.strip()
        for field_name in ('name_ar', 'username', 'phone'):
            value = getattr(dto, field_name)
            if value is not None:
                setattr(target, field_name, value)
        if dto.has_full_access is not None:
            target.has_full_access = dto.has_full_access

        if dto.clear_role:
            target.role = None
        elif dto.role_id is not None:
            target.role = _get_active(Role, dto.role_id, 'role_id')
        if dto.clear_department:
            target.department = None
        elif dto.department_id is not None:
            target.department = _get_active(Department, dto.department_id, 'department_id')
        if dto.clear_job_title:
            target.job_title = None
        elif dto.job_title_id is not None:
            target.job_title = _get_active(JobTitle, dto.job_title_id, 'job_title_id')

        if dto.password:
            UserService._check_password(dto.password, target)
            target.set_password(dto.password)

        target.save()
        if dto.permissions is not None:
            target.direct_permissions.set(resolve_permissions(dto.permissions))

        UserService.recorder.record_edit(target, before, actor=user)
        if dto.password:
            UserService.recorder.record_secret_change(target, 'password', actor=user)
        return target

    @classmethod
    def _delete_one(cls, user, instance):
        if user is not None and instance.pk == getattr(user, 'pk', None):
            raise ValidationError("You cannot delete your own account")
        # Revisions keep pointing at their author
        if instance.revisions.exists():
            raise ValidationError(
                f"User '{instance.email}' has recorded changes and cannot be deleted; "
                f"deactivate the account instead"
            )
        super()._delete_one(user, instance)

    @classmethod
    def _set_activity(cls, user, instance, is_active):
        if not is_active and user is not None and instance.pk == getattr(user, 'pk', None):
            raise ValidationError("You cannot deactivate your own account")
        return super()._set_activity(user, instance, is_active)
