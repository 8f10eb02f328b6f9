import logging

from django.db import transaction, models
from django.db.models import Q
from django.core.exceptions import ValidationError

from HR.work_structures.dtos import DepartmentCreateDTO, DepartmentUpdateDTO
from HR.work_structures.models import Department
from core.base.services import AuditedEntityService
from core.revisions.recorder import RevisionRecorder

logger = logging.getLogger(__name__)

DEPARTMENT_TRACKED_FIELDS = ('code', 'name_en', 'name_ar', 'description', 'parent', 'is_active')


class DepartmentService(AuditedEntityService):
    """Service for Department business logic"""
    model = Department
    recorder = RevisionRecorder('Department', DEPARTMENT_TRACKED_FIELDS)

    @staticmethod
    def list_departments(filters: dict = None) -> models.QuerySet:
        """
        List departments with flexible filtering.

        Args:
            filters: Dictionary of filters
                - parent: parent department ID ('root' for top-level only)
                - search: matches code and names
                - is_active: 'true' / 'false'

        Returns:
            QuerySet of Department objects
        """
        filters = filters or {}
        queryset = Department.objects.all().select_related('parent').order_by('code')

        parent = filters.get('parent')
        if parent == 'root':
            queryset = queryset.filter(parent__isnull=True)
        elif parent:
            queryset = queryset.filter(parent_id=parent)

        search = filters.get('search')
        if search:
            queryset = queryset.filter(
                Q(code__icontains=search) |
                Q(name_en__icontains=search) |
                Q(name_ar__icontains=search)
            )

        return queryset.filter_by_search_params({'is_active': filters.get('is_active')})

    @staticmethod
    def _get_parent(parent_id):
        try:
            parent = Department.objects.get(pk=parent_id)
        except Department.DoesNotExist:
            raise ValidationError({'parent_id': f"Department with id {parent_id} not found"})
        if not parent.is_active:
            raise ValidationError({'parent_id': f"Parent department '{parent.name_en}' is inactive"})
        return parent

    @staticmethod
    @transaction.atomic
    def create(user, dto: DepartmentCreateDTO) -> Department:
        """
        Create new department with validation.

        Validates:
        - Code is unique
        - Parent exists and is active
        """
        code = (dto.code or '').strip()
        if not code:
            raise ValidationError({'code': 'Code is required'})
        if Department.objects.filter(code__iexact=code).exists():
            raise ValidationError({'code': f"Department with code '{code}' already exists"})
        if not (dto.name_en or '').strip():
            raise ValidationError({'name_en': 'Name is required'})

        parent = None
        if dto.parent_id is not None:
            parent = DepartmentService._get_parent(dto.parent_id)

        department = Department.objects.create(
            code=code,
            name_en=dto.name_en.strip(),
            name_ar=dto.name_ar or '',
            description=dto.description or '',
            parent=parent,
            is_active=dto.is_active,
            created_by=user,
            updated_by=user,
        )
        DepartmentService.recorder.record_create(department, actor=user)
        logger.info("Department #%s '%s' created by %s", department.pk, department.code, getattr(user, 'pk', None))
        return department

    @staticmethod
    @transaction.atomic
    def update(user, dto: DepartmentUpdateDTO) -> Department:
        """
        Update department fields. Records one revision per changed field.
        """
        department = DepartmentService.get(dto.department_id)
        before = DepartmentService.recorder.snapshot(department)

        if dto.code is not None:
            code = dto.code.strip()
            if not code:
                raise ValidationError({'code': 'Code is required'})
            if Department.objects.filter(code__iexact=code).exclude(pk=department.pk).exists():
                raise ValidationError({'code': f"Department with code '{code}' already exists"})
            department.code = code
        if dto.name_en is not None:
            if not dto.name_en.strip():
                raise ValidationError({'name_en': 'Name is required'})
            department.name_en = dto.name_en.strip()
        if dto.name_ar is not None:
            department.name_ar = dto.name_ar
        if dto.description is not None:
            department.description = dto.description

        if dto.clear_parent:
            department.parent = None
        elif dto.parent_id is not None and dto.parent_id != department.parent_id:
            department.parent = DepartmentService._get_parent(dto.parent_id)

        department.full_clean(exclude=['created_by', 'updated_by'], validate_unique=False)
        department.updated_by = user
        department.save()

        DepartmentService.recorder.record_edit(department, before, actor=user)
        return department
