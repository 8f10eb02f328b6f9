import logging

from django.db import transaction, models
from django.db.models import Q
from django.core.exceptions import ValidationError

from HR.work_structures.dtos import JobTitleCreateDTO, JobTitleUpdateDTO
from HR.work_structures.models import Department, JobTitle
from core.base.services import AuditedEntityService
from core.revisions.recorder import RevisionRecorder

logger = logging.getLogger(__name__)

JOB_TITLE_TRACKED_FIELDS = ('code', 'name_en', 'name_ar', 'description', 'department', 'is_active')


class JobTitleService(AuditedEntityService):
    """Service for JobTitle business logic"""
    model = JobTitle
    recorder = RevisionRecorder('JobTitle', JOB_TITLE_TRACKED_FIELDS)

    @staticmethod
    def list_job_titles(filters: dict = None) -> models.QuerySet:
        """
        List job titles.

        Args:
            filters: Dictionary of filters
                - department: department ID
                - search: matches code and names
                - is_active: 'true' / 'false'
        """
        filters = filters or {}
        queryset = JobTitle.objects.all().select_related('department').order_by('code')

        department = filters.get('department')
        if department:
            queryset = queryset.filter(department_id=department)

        search = filters.get('search')
        if search:
            queryset = queryset.filter(
                Q(code__icontains=search) |
                Q(name_en__icontains=search) |
                Q(name_ar__icontains=search)
            )

        return queryset.filter_by_search_params({'is_active': filters.get('is_active')})

    @staticmethod
    def _get_department(department_id):
        try:
            department = Department.objects.get(pk=department_id)
        except Department.DoesNotExist:
            raise ValidationError({'department_id': f"Department with id {department_id} not found"})
        if not department.is_active:
            raise ValidationError({'department_id': f"Department '{department.name_en}' is inactive"})
        return department

    @staticmethod
    @transaction.atomic
    def create(user, dto: JobTitleCreateDTO) -> JobTitle:
        code = (dto.code or '').strip()
        if not code:
            raise ValidationError({'code': 'Code is required'})
        if JobTitle.objects.filter(code__iexact=code).exists():
            raise ValidationError({'code': f"Job title with code '{code}' already exists"})
        if not (dto.name_en or '').strip():
            raise ValidationError({'name_en': 'Name is required'})

        department = None
        if dto.department_id is not None:
            department = JobTitleService._get_department(dto.department_id)

        job_title = JobTitle.objects.create(
            code=code,
            name_en=dto.name_en.strip(),
            name_ar=dto.name_ar or '',
            description=dto.description or '',
            department=department,
            is_active=dto.is_active,
            created_by=user,
            updated_by=user,
        )
        JobTitleService.recorder.record_create(job_title, actor=user)
        logger.info("Job title #%s '%s' created by %s", job_title.pk, job_title.code, getattr(user, 'pk', None))
        return job_title

    @staticmethod
    @transaction.atomic
    def update(user, dto: JobTitleUpdateDTO) -> JobTitle:
        job_title = JobTitleService.get(dto.job_title_id)
        before = JobTitleService.recorder.snapshot(job_title)

        if dto.code is not None:
            code = dto.code.strip()
            if not code:
                raise ValidationError({'code': 'Code is required'})
            if JobTitle.objects.filter(code__iexact=code).exclude(pk=job_title.pk).exists():
                raise ValidationError({'code': f"Job title with code '{code}' already exists"})
            job_title.code = code
        if dto.name_en is not None:
            if not dto.name_en.strip():
                raise ValidationError({'name_en': 'Name is required'})
            job_title.name_en = dto.name_en.strip()
        if dto.name_ar is not None:
            job_title.name_ar = dto.name_ar
        if dto.description is not None:
            job_title.description = dto.description

        if dto.clear_department:
            job_title.department = None
        elif dto.department_id is not None:
            job_title.department = JobTitleService._get_department(dto.department_id)

        job_title.updated_by = user
        job_title.save()

        JobTitleService.recorder.record_edit(job_title, before, actor=user)
        return job_title
